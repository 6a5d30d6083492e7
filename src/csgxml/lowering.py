"""Per-construct validation and xcsg attribute generation.

Each lowering writes the attributes and any synthesized sub-elements of one
xcsg element and returns the element that the node's children belong under.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from types import MappingProxyType

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from csgxml.dimension import child_dimensions, effective_children
from csgxml.document import XmlNode
from csgxml.errors import UnsupportedError, ValidationError
from csgxml.models import (
    ConeParams,
    CuboidParams,
    Node,
    OffsetParams,
    RadiusParams,
    RectangleParams,
    SweepParams,
)
from csgxml.transforms import apply_rotate_extrude_correction, emit_tmatrix
from csgxml.values import CsgValue

# projection(cut=true) slices with a thin slab through z=0
CUT_SLAB_SIZE = (1.0e4, 1.0e4, 1.0e-4)

# spline control points per full turn of twist
SWEEP_SEGMENTS_PER_TURN = 36


def _checked(schema: type[BaseModel], node: Node, **data) -> BaseModel:
    """Build a parameter schema, re-raising pydantic errors with the .csg location."""
    try:
        return schema(**data)
    except PydanticValidationError as e:
        reasons = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ValidationError(reasons, line_no=node.line_no, func=node.func) from e


def _extents(value: CsgValue, count: int, node: Node) -> list[float]:
    """``size`` may be a scalar (same on every axis) or a vector."""
    if not value.is_vector:
        return [value.to_float()] * count
    if len(value) < count:
        raise ValidationError(
            f"size must have {count} values, got {value}", line_no=node.line_no, func=node.func
        )
    return [value[i].to_float() for i in range(count)]


# ---------------------------------------------------------------------------
# 2d
# ---------------------------------------------------------------------------


def _lower_circle(node: Node, xml: XmlNode) -> XmlNode:
    params = _checked(RadiusParams, node, r=node.get_value("r").to_float())
    xml.add_property("r", params.r)
    return xml


def _lower_rectangle(node: Node, xml: XmlNode) -> XmlNode:
    dx, dy = _extents(node.get_value("size"), 2, node)
    params = _checked(RectangleParams, node, dx=dx, dy=dy, center=node.get_scalar("center"))
    xml.add_property("dx", params.dx)
    xml.add_property("dy", params.dy)
    xml.add_property("center", params.center)
    return xml


def _polygon_path(node: Node, npoints: int) -> list[int]:
    paths = node.get_optional("paths")
    if paths is None or not paths.is_vector or len(paths) == 0:
        return list(range(npoints))
    if len(paths) != 1:
        raise ValidationError(
            "polygon with internal hole(s) is not supported", line_no=node.line_no, func=node.func
        )

    path = [index.to_int() for index in paths[0]]
    for index in path:
        if not 0 <= index < npoints:
            raise ValidationError(
                f"polygon path index {index} out of range for {npoints} points",
                line_no=node.line_no,
                func=node.func,
            )
    return path


def _lower_polygon(node: Node, xml: XmlNode) -> XmlNode:
    points = node.get_value("points")
    if not points.is_vector:
        raise ValidationError("polygon points must be a vector", line_no=node.line_no, func=node.func)

    xml_vertices = xml.add_child("vertices")
    for index in _polygon_path(node, len(points)):
        point = points[index]
        if not point.is_vector or len(point) < 2:
            raise ValidationError(
                f"polygon point {index} must have 2 values: {point}",
                line_no=node.line_no,
                func=node.func,
            )
        xml_vertex = xml_vertices.add_child("vertex")
        xml_vertex.add_property("x", str(point[0]))
        xml_vertex.add_property("y", str(point[1]))
    return xml


def _lower_offset(node: Node, xml: XmlNode) -> XmlNode:
    radius = node.get_optional("r")
    delta = node.get_optional("delta")
    if (radius is None) == (delta is None):
        raise ValidationError(
            "offset requires exactly one of 'r' or 'delta'", line_no=node.line_no, func=node.func
        )
    chamfer = node.get_optional("chamfer")

    params = _checked(
        OffsetParams,
        node,
        delta=(radius if radius is not None else delta).to_float(),
        round=radius is not None,
        chamfer=str(chamfer) if chamfer is not None else "false",
    )
    xml.add_property("delta", params.delta)
    xml.add_property("round", params.round)
    xml.add_property("chamfer", params.chamfer)
    return xml


def _lower_projection(node: Node, xml: XmlNode) -> XmlNode:
    if not node.get_value("cut").to_bool():
        return xml

    # A cut is the projection of the children intersected with a thin slab.
    xml_intersection = xml.add_child("intersection3d")
    xml_slab = xml_intersection.add_child("cuboid")
    dx, dy, dz = CUT_SLAB_SIZE
    xml_slab.add_property("dx", dx)
    xml_slab.add_property("dy", dy)
    xml_slab.add_property("dz", dz)
    xml_slab.add_property("center", "true")
    return xml_intersection


# ---------------------------------------------------------------------------
# 3d
# ---------------------------------------------------------------------------


def _lower_sphere(node: Node, xml: XmlNode) -> XmlNode:
    params = _checked(RadiusParams, node, r=node.get_value("r").to_float())
    xml.add_property("r", params.r)
    return xml


def _lower_cuboid(node: Node, xml: XmlNode) -> XmlNode:
    dx, dy, dz = _extents(node.get_value("size"), 3, node)
    params = _checked(CuboidParams, node, dx=dx, dy=dy, dz=dz, center=node.get_scalar("center"))
    xml.add_property("dx", params.dx)
    xml.add_property("dy", params.dy)
    xml.add_property("dz", params.dz)
    xml.add_property("center", params.center)
    return xml


def _lower_cone(node: Node, xml: XmlNode) -> XmlNode:
    params = _checked(
        ConeParams,
        node,
        h=node.get_value("h").to_float(),
        r1=node.get_value("r1").to_float(),
        r2=node.get_value("r2").to_float(),
        center=node.get_scalar("center"),
    )
    xml.add_property("h", params.h)
    xml.add_property("r1", params.r1)
    xml.add_property("r2", params.r2)
    xml.add_property("center", params.center)
    return xml


def _sweep_params(node: Node) -> SweepParams:
    data: dict = {"height": node.get_value("height").to_float()}

    twist = node.get_optional("twist")
    if twist is not None:
        data["twist"] = twist.to_float()
    slices = node.get_optional("slices")
    if slices is not None:
        data["slices"] = slices.to_int()
    center = node.get_optional("center")
    if center is not None:
        data["center"] = str(center)
    scale = node.get_optional("scale")
    if scale is not None:
        if scale.is_vector:
            if len(scale) < 2:
                raise ValidationError(
                    f"scale must have 2 values, got {scale}", line_no=node.line_no, func=node.func
                )
            data["scale"] = (scale[0].to_float(), scale[1].to_float())
        else:
            data["scale"] = (scale.to_float(), scale.to_float())
    return _checked(SweepParams, node, **data)


def sweep_segment_count(twist_degrees: float, slices: int | None = None) -> int:
    """Spline segments for an extrusion: 36 per full turn of twist, at least one."""
    nseg = max(1, int(SWEEP_SEGMENTS_PER_TURN * abs(twist_degrees) / 360.0))
    if slices is not None and slices > nseg:
        nseg = slices
    return nseg


def sweep_control_points(params: SweepParams) -> list[tuple[float, float, float, float, float, float]]:
    """Control points ``(x, y, z, vx, vy, vz)`` of the sweep spline path.

    The direction vector starts as +Y, turns with the (negated) twist and
    is stretched by the interpolated top scaling.
    """
    twist = -math.radians(params.twist)
    nseg = sweep_segment_count(params.twist, params.slices)
    scale_x, scale_y = params.scale

    dz = params.height / nseg
    dangle = twist / nseg
    dscale_x = (scale_x - 1.0) / nseg
    dscale_y = (scale_y - 1.0) / nseg

    z = -0.5 * params.height if params.center == "true" else 0.0
    vx0, vy0, vz0 = 0.0, 1.0, 0.0
    points = [(0.0, 0.0, z, vx0, vy0, vz0)]

    angle = 0.0
    sx = sy = 1.0
    for _ in range(nseg):
        z += dz
        angle += dangle
        sx += dscale_x
        sy += dscale_y
        sa = math.sin(angle)
        ca = math.cos(angle)
        vx = ca * vx0 - sa * vy0
        vy = sa * vx0 + ca * vy0
        points.append((0.0, 0.0, z, vx * sx, vy * sy, vz0))
    return points


def _lower_sweep(node: Node, xml: XmlNode) -> XmlNode:
    params = _sweep_params(node)
    # height and centering live in the spline path; the element gets no dz/center
    xml_path = xml.add_child("spline_path")
    for x, y, z, vx, vy, vz in sweep_control_points(params):
        xml_point = xml_path.add_child("cpoint")
        xml_point.add_property("x", x)
        xml_point.add_property("y", y)
        xml_point.add_property("z", z)
        xml_point.add_property("vx", vx)
        xml_point.add_property("vy", vy)
        xml_point.add_property("vz", vz)
    return xml


def _lower_rotate_extrude(node: Node, xml: XmlNode) -> XmlNode:
    angle = node.get_optional("angle")
    degrees = angle.to_float() if angle is not None else 360.0
    xml.add_property("angle", math.radians(degrees))
    apply_rotate_extrude_correction(node)
    return xml


def _lower_polyhedron(node: Node, xml: XmlNode) -> XmlNode:
    points = node.get_value("points")
    npoints = len(points) if points.is_vector else 0
    if npoints < 4:
        raise ValidationError("polyhedron with too few points", line_no=node.line_no, func=node.func)

    xml_vertices = xml.add_child("vertices")
    for ip, point in enumerate(points):
        if len(point) == 1:
            raise ValidationError(
                f"Illegal polyhedron point value at position({ip}): {point}",
                line_no=node.line_no,
                func=node.func,
            )
        if len(point) != 3:
            raise ValidationError(
                f"polyhedron points must have 3 values ({ip} {len(point)})",
                line_no=node.line_no,
                func=node.func,
            )
        xml_vertex = xml_vertices.add_child("vertex")
        xml_vertex.add_property("x", str(point[0]))
        xml_vertex.add_property("y", str(point[1]))
        xml_vertex.add_property("z", str(point[2]))

    # older OpenSCAD versions export faces as "triangles"
    faces = node.get_optional("faces")
    if faces is None:
        faces = node.get_optional("triangles")
    if faces is None:
        faces = node.get_value("faces")

    xml_faces = xml.add_child("faces")
    for face in faces:
        if not face.is_vector or len(face) < 3:
            raise ValidationError(
                "polyhedron face must have 3 or more values", line_no=node.line_no, func=node.func
            )
        xml_face = xml_faces.add_child("face")
        # OpenSCAD winds faces clockwise seen from outside, xcsg counter-clockwise
        for vertex in reversed(face.items):
            index = vertex.to_int()
            if not 0 <= index < npoints:
                raise ValidationError(
                    f"polyhedron face index {index} out of range for {npoints} points",
                    line_no=node.line_no,
                    func=node.func,
                )
            xml_face.add_child("fv").add_property("index", str(vertex))
    return xml


# ---------------------------------------------------------------------------
# operations
# ---------------------------------------------------------------------------


def _check_mixed_dimensions(node: Node, xml: XmlNode) -> None:
    if len(child_dimensions(node)) > 1:
        raise ValidationError(
            f"Mixed dimension children provided to '{node.tag}' --> {xml.tag}",
            line_no=node.line_no,
            func=node.func,
        )


def _lower_union(node: Node, xml: XmlNode) -> XmlNode:
    _check_mixed_dimensions(node, xml)
    return xml


def _lower_boolean(node: Node, xml: XmlNode) -> XmlNode:
    if len(effective_children(node)) < 2:
        raise ValidationError(
            f"Fewer than 2 children provided to '{node.tag}' --> {xml.tag}",
            line_no=node.line_no,
            func=node.func,
        )
    _check_mixed_dimensions(node, xml)
    return xml


LOWERINGS: MappingProxyType[str, Callable[[Node, XmlNode], XmlNode]] = MappingProxyType(
    {
        "circle": _lower_circle,
        "rectangle": _lower_rectangle,
        "polygon": _lower_polygon,
        "offset2d": _lower_offset,
        "projection2d": _lower_projection,
        "sphere": _lower_sphere,
        "cuboid": _lower_cuboid,
        "cone": _lower_cone,
        "sweep": _lower_sweep,
        "rotate_extrude": _lower_rotate_extrude,
        "polyhedron": _lower_polyhedron,
        "union2d": _lower_union,
        "union3d": _lower_union,
        "hull2d": _lower_union,
        "hull3d": _lower_union,
        "difference2d": _lower_boolean,
        "difference3d": _lower_boolean,
        "intersection2d": _lower_boolean,
        "intersection3d": _lower_boolean,
        "minkowski2d": _lower_boolean,
        "minkowski3d": _lower_boolean,
    }
)


def lower_node(node: Node, target: str, parent: XmlNode) -> XmlNode:
    """Emit ``node`` as a ``target`` element under ``parent``.

    A node's transform, if any, is appended after its own attributes and
    sub-elements. Returns the element the node's children go under.

    Raises:
        UnsupportedError: If ``target`` has no lowering.
        ValidationError: If the node's parameters or children are invalid.
    """
    lower = LOWERINGS.get(target)
    if lower is None:
        raise UnsupportedError(
            f"Not supported : '{node.tag}' --> {target}", line_no=node.line_no, func=node.func
        )
    container = lower(node, parent.add_child(target))
    if node.matrix is not None:
        emit_tmatrix(container, node.matrix)
    return container
