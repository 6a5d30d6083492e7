"""Rebuild the statement hierarchy from the flat record stream."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from csgxml.errors import ParseError
from csgxml.models import FunctionRecord, Node
from csgxml.warning_policy import WarningPolicy


def build_tree(
    records: Iterable[FunctionRecord], *, warning_policy: WarningPolicy | None = None
) -> Node:
    """Build the node tree under a synthetic level -1 root.

    Records must be in depth-first pre-order, each one either a child of the
    previous record or a return to one of its ancestors.

    Raises:
        ParseError: If a record skips a nesting level, or on malformed parameters.
    """
    records = list(records)
    root = Node()
    index = _build_children(root, records, 0, warning_policy)
    if index < len(records):
        record = records[index]
        raise ParseError(
            f"statement at level {record.level} has no enclosing statement at level "
            f"{record.level - 1}",
            line_no=record.line_no,
            func=record.text,
        )
    return root


def _build_children(
    parent: Node,
    records: list[FunctionRecord],
    index: int,
    warning_policy: WarningPolicy | None,
) -> int:
    """Attach consecutive child records to ``parent``; return the first unconsumed index."""
    while index < len(records):
        record = records[index]
        if record.level != parent.level + 1:
            break
        child = Node.from_record(record, warning_policy=warning_policy)
        parent.children.append(child)
        index = _build_children(child, records, index + 1, warning_policy)
    return index


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all its descendants in pre-order."""
    yield node
    for child in node.children:
        yield from walk(child)


def render_tree(root: Node) -> str:
    """Indented one-line-per-statement listing of the tree and its parameters."""
    lines: list[str] = []
    for node in walk(root):
        if node.is_root:
            continue
        parts = [" " * node.level + node.tag]
        parts.extend(f"{name}={value}" for name, value in sorted(node.params.items()))
        lines.append(" ".join(parts))
    return "\n".join(lines) + "\n" if lines else ""
