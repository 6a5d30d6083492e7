"""4x4 homogeneous transforms carried by multmatrix and rotate_extrude."""

from __future__ import annotations

import numpy as np

from csgxml.document import XmlNode
from csgxml.errors import ValidationError
from csgxml.models import Node
from csgxml.params import positional_name
from csgxml.values import CsgValue

# OpenSCAD's rotate_extrude revolves the XY profile into the XZ plane, xcsg's
# stays in XY; this is the -90 degree rotation about X between the two.
ROTATE_EXTRUDE_CORRECTION = np.array(
    [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, -1.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ],
    dtype=np.float64,
)
ROTATE_EXTRUDE_CORRECTION.setflags(write=False)


def identity() -> np.ndarray:
    return np.eye(4, dtype=np.float64)


def compose(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Matrix product ``first @ second``."""
    return np.asarray(first, dtype=np.float64) @ np.asarray(second, dtype=np.float64)


def matrix_from_value(value: CsgValue, node: Node) -> np.ndarray:
    """Convert a ``[[...],[...],[...],[...]]`` value into a 4x4 array.

    Raises:
        ValidationError: Unless the value is exactly 4 rows of 4 numbers.
    """
    if not value.is_vector or len(value) != 4:
        raise ValidationError("multmatrix size != 4", line_no=node.line_no, func=node.func)

    matrix = identity()
    for i, row in enumerate(value):
        if not row.is_vector or len(row) != 4:
            raise ValidationError(
                f"multmatrix row {i} size != 4", line_no=node.line_no, func=node.func
            )
        for j, entry in enumerate(row):
            matrix[i, j] = entry.to_float()
    return matrix


def assign_multmatrix(node: Node) -> np.ndarray:
    """Set ``node.matrix`` from its single unnamed parameter."""
    value = node.params.get(positional_name(0))
    if value is None:
        raise ValidationError("multmatrix without a matrix", line_no=node.line_no, func=node.func)
    node.matrix = matrix_from_value(value, node)
    return node.matrix


def apply_rotate_extrude_correction(node: Node) -> np.ndarray:
    if node.matrix is None:
        node.matrix = ROTATE_EXTRUDE_CORRECTION.copy()
    else:
        node.matrix = compose(ROTATE_EXTRUDE_CORRECTION, node.matrix)
    return node.matrix


def emit_tmatrix(parent: XmlNode, matrix: np.ndarray) -> XmlNode:
    """Append ``<tmatrix>`` with four ``<trow c0.. c3>`` rows."""
    xml_matrix = parent.add_child("tmatrix")
    for row in matrix:
        xml_row = xml_matrix.add_child("trow")
        for col, entry in enumerate(row):
            xml_row.add_property(f"c{col}", float(entry))
    return xml_matrix
