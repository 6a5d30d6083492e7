"""Translate .csg statements into an xcsg document."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from csgxml.dimension import UNDETERMINED, is_dummy, resolve_dimension
from csgxml.document import XcsgDocument, XmlNode
from csgxml.lexer import tokenize_csg
from csgxml.lowering import lower_node
from csgxml.models import FunctionRecord, Node
from csgxml.tags import translate_root_tag, translate_tag
from csgxml.transforms import assign_multmatrix
from csgxml.tree import build_tree
from csgxml.warning_policy import WarningPolicy, emit_warning


def translate_csg(
    source: str | Path, *, warning_policy: WarningPolicy | None = None
) -> XcsgDocument:
    """Translate .csg text (or a path to a .csg file) into an xcsg document.

    Raises:
        CsgXmlError: On any parse, validation or unsupported-construct error;
            no partial document is returned.
    """
    return translate_records(tokenize_csg(source), warning_policy=warning_policy)


def translate_records(
    records: Iterable[FunctionRecord], *, warning_policy: WarningPolicy | None = None
) -> XcsgDocument:
    """Translate pre-tokenized records into an xcsg document."""
    root = build_tree(records, warning_policy=warning_policy)
    document = XcsgDocument()
    xml_root = document.root.add_child(translate_root_tag(root))
    for child in root.children:
        _emit_node(child, xml_root, warning_policy)
    return document


def _emit_node(node: Node, parent: XmlNode, warning_policy: WarningPolicy | None) -> None:
    dimension = resolve_dimension(node)
    if dimension == UNDETERMINED:
        if not is_dummy(node):
            emit_warning(
                "W03",
                f"'{node.tag}' produces no 2d or 3d geometry and was dropped",
                line_no=node.line_no,
                policy=warning_policy,
            )
        return

    if node.tag == "multmatrix":
        assign_multmatrix(node)

    target = translate_tag(node, dimension=dimension, warning_policy=warning_policy)
    container = lower_node(node, target, parent)
    for child in node.children:
        _emit_node(child, container, warning_policy)
