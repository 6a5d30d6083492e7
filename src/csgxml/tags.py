"""Map OpenSCAD statement names to xcsg element names."""

from __future__ import annotations

from types import MappingProxyType

from csgxml.dimension import effective_children, resolve_dimension
from csgxml.errors import UnsupportedError
from csgxml.models import Node
from csgxml.warning_policy import WarningPolicy, emit_warning

WILDCARD = "*"
NOT_APPLICABLE = "N/A"
ROOT_TEMPLATE = "union*"

TAG_MAP = MappingProxyType(
    {
        # 3d primitives
        "cube": "cuboid",
        "cylinder": "cone",
        "polyhedron": "polyhedron",
        "sphere": "sphere",
        "linear_extrude": "sweep",
        "rotate_extrude": "rotate_extrude",
        # operations, suffixed 2d/3d from their operands
        "group": "union*",
        "union": "union*",
        "color": "union*",
        "multmatrix": "union*",
        "render": "union*",
        "difference": "difference*",
        "intersection": "intersection*",
        "hull": "hull*",
        "minkowski": "minkowski*",
        # 2d
        "circle": "circle",
        "polygon": "polygon",
        "square": "rectangle",
        "offset": "offset2d",
        "projection": "projection2d",
        # mapped only to produce a clear error
        "import": NOT_APPLICABLE,
        "surface": NOT_APPLICABLE,
        "text": NOT_APPLICABLE,
        "resize": NOT_APPLICABLE,
    }
)

# xcsg booleans need two operands; with one they reduce to a union.
SINGLE_OPERAND_REWRITES = MappingProxyType(
    {
        "difference2d": "union2d",
        "difference3d": "union3d",
        "intersection2d": "union2d",
        "intersection3d": "union3d",
    }
)


def resolve_wildcard(template: str, dimension: int) -> str:
    """Replace a trailing ``*`` with ``2d``/``3d``; unresolved templates come back unchanged."""
    if not template.endswith(WILDCARD) or dimension not in (2, 3):
        return template
    return f"{template[:-1]}{dimension}d"


def translate_tag(
    node: Node,
    *,
    dimension: int | None = None,
    warning_policy: WarningPolicy | None = None,
) -> str:
    """Return the xcsg element name for ``node``.

    Raises:
        UnsupportedError: For unmapped statements, or when the operand
            dimension needed to resolve the suffix is unknown.
    """
    template = TAG_MAP.get(node.tag)
    if template is None or template == NOT_APPLICABLE:
        raise UnsupportedError(
            f"Not supported : '{node.tag}' --> {template or '?'}",
            line_no=node.line_no,
            func=node.func,
        )

    if dimension is None:
        dimension = resolve_dimension(node)
    target = resolve_wildcard(template, dimension)
    if target.endswith(WILDCARD):
        raise UnsupportedError(
            f"OpenSCAD node dimension could not be determined: {node.tag} --> {template}",
            line_no=node.line_no,
            func=node.func,
        )

    rewrite = SINGLE_OPERAND_REWRITES.get(target)
    if rewrite is not None and len(effective_children(node)) == 1:
        emit_warning(
            "W02",
            f"'{node.tag}' with a single operand translated as {rewrite}",
            line_no=node.line_no,
            policy=warning_policy,
        )
        target = rewrite
    return target


def translate_root_tag(root: Node) -> str:
    """The document root is always a union, since a .csg file may hold several top-level statements."""
    target = resolve_wildcard(ROOT_TEMPLATE, resolve_dimension(root))
    if target.endswith(WILDCARD):
        raise UnsupportedError("no 2d or 3d geometry found in the .csg input")
    return target
