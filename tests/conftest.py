"""Shared fixtures for csgxml tests."""

from __future__ import annotations

import pytest

from csgxml.models import FunctionRecord

IDENTITY_MATRIX = "[[1,0,0,0],[0,1,0,0],[0,0,1,0],[0,0,0,1]]"


def records(*statements: tuple[int, str]) -> list[FunctionRecord]:
    """Build records from ``(level, text)`` pairs, numbering lines from 1."""
    return [FunctionRecord(level, i + 1, text) for i, (level, text) in enumerate(statements)]


@pytest.fixture
def cube_csg() -> str:
    return """\
group() {
	multmatrix([[1, 0, 0, 5], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]) {
		cube(size = [1, 2, 3], center = false);
	}
}
"""


@pytest.fixture
def difference_csg() -> str:
    return """\
difference() {
	cube(size = [10, 10, 10], center = true);
	sphere($fn = 0, $fa = 12, $fs = 2, r = 6);
	group();
}
"""


@pytest.fixture
def twisted_extrude_csg() -> str:
    return """\
linear_extrude(height = 10, center = false, convexity = 1, twist = 360, slices = 1, scale = [1, 1], $fn = 0, $fa = 12, $fs = 2) {
	square(size = [3, 4], center = false);
}
"""
