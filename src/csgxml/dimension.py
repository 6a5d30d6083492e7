"""Decide whether a statement produces 2-D geometry, 3-D geometry, or none."""

from __future__ import annotations

from types import MappingProxyType

from csgxml.errors import UnsupportedError
from csgxml.models import Node

UNDETERMINED = 0

DIRECT_DIMENSIONS = MappingProxyType(
    {
        "circle": 2,
        "square": 2,
        "polygon": 2,
        "projection": 2,
        "sphere": 3,
        "cylinder": 3,
        "cube": 3,
        "polyhedron": 3,
        "linear_extrude": 3,
        "rotate_extrude": 3,
    }
)

# Tags whose dimension is that of their operands.
PASS_THROUGH_TAGS: frozenset[str] = frozenset(
    {
        "group",
        "union",
        "color",
        "multmatrix",
        "render",
        "difference",
        "intersection",
        "minkowski",
        "offset",
        "hull",
    }
)

UNSUPPORTED_TAGS = MappingProxyType(
    {
        "text": "'text' is not supported",
        "surface": "'surface' is not supported",
        "import": "'import' is not supported with this file type",
        "resize": "'resize' is not supported",
    }
)


def check_supported(node: Node) -> None:
    """Raise for statements that can never be translated."""
    reason = UNSUPPORTED_TAGS.get(node.tag)
    if reason is not None:
        raise UnsupportedError(reason, line_no=node.line_no, func=node.func)


def is_dummy(node: Node) -> bool:
    """True for a pass-through statement with nothing but other dummies below it.

    An empty ``group()``, ``multmatrix(...)`` or ``color(...)`` contributes
    no geometry and is not counted as an operand.
    """
    return node.tag in PASS_THROUGH_TAGS and all(is_dummy(child) for child in node.children)


def effective_children(node: Node) -> list[Node]:
    return [child for child in node.children if not is_dummy(child)]


def resolve_dimension(node: Node) -> int:
    """Return 2, 3 or ``UNDETERMINED`` for ``node``.

    A tag with a fixed dimension decides on its own. Otherwise the first
    non-dummy child with a known dimension decides; pass-through children
    are resolved recursively.

    Raises:
        UnsupportedError: If the node or an inspected child is unsupported.
    """
    check_supported(node)
    dim = DIRECT_DIMENSIONS.get(node.tag, UNDETERMINED)
    if dim:
        return dim

    for child in effective_children(node):
        check_supported(child)
        dim = DIRECT_DIMENSIONS.get(child.tag, UNDETERMINED)
        if not dim and child.tag in PASS_THROUGH_TAGS:
            dim = resolve_dimension(child)
        if dim:
            return dim
    return UNDETERMINED


def child_dimensions(node: Node) -> set[int]:
    """Distinct known dimensions among the non-dummy children."""
    dims = {resolve_dimension(child) for child in effective_children(node)}
    dims.discard(UNDETERMINED)
    return dims
