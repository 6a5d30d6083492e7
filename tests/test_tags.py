"""Tests for OpenSCAD -> xcsg name translation."""

import warnings

import pytest

from conftest import records
from csgxml.errors import UnsupportedError, ValidationError
from csgxml.tags import TAG_MAP, resolve_wildcard, translate_root_tag, translate_tag
from csgxml.tree import build_tree
from csgxml.warning_policy import WarningPolicy


def _first(*statements):
    return build_tree(records(*statements)).children[0]


class TestTagMap:
    def test_immutable(self):
        with pytest.raises(TypeError):
            TAG_MAP["cube"] = "box"

    def test_extrusion_targets(self):
        assert TAG_MAP["linear_extrude"] == "sweep"
        assert TAG_MAP["rotate_extrude"] == "rotate_extrude"


class TestResolveWildcard:
    def test_suffixes(self):
        assert resolve_wildcard("union*", 2) == "union2d"
        assert resolve_wildcard("hull*", 3) == "hull3d"

    def test_fixed_names_untouched(self):
        assert resolve_wildcard("cuboid", 3) == "cuboid"

    def test_undetermined_left_alone(self):
        assert resolve_wildcard("union*", 0) == "union*"


class TestTranslateTag:
    @pytest.mark.parametrize(
        ("func", "expected"),
        [
            ("cube(size=1,center=false)", "cuboid"),
            ("cylinder(h=1,r1=1,r2=1,center=false)", "cone"),
            ("square(size=1,center=false)", "rectangle"),
            ("linear_extrude(height=1)", "sweep"),
            ("rotate_extrude(angle=360)", "rotate_extrude"),
        ],
    )
    def test_fixed(self, func, expected):
        assert translate_tag(_first((0, func))) == expected

    def test_group_2d(self):
        node = _first((0, "group()"), (1, "circle(r=1)"))
        assert translate_tag(node) == "union2d"

    def test_multmatrix_3d(self):
        node = _first((0, "multmatrix([[1,0,0,0],[0,1,0,0],[0,0,1,0],[0,0,0,1]])"), (1, "sphere(r=1)"))
        assert translate_tag(node) == "union3d"

    def test_offset_is_fixed_2d(self):
        node = _first((0, "offset(r=1)"), (1, "circle(r=1)"))
        assert translate_tag(node) == "offset2d"

    def test_difference_with_two_operands(self):
        node = _first((0, "difference()"), (1, "sphere(r=2)"), (1, "sphere(r=1)"))
        assert translate_tag(node) == "difference3d"

    def test_single_operand_difference_becomes_union(self):
        node = _first((0, "difference()"), (1, "circle(r=2)"), (1, "group()"))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            assert translate_tag(node) == "union2d"
        assert any("[W02]" in str(x.message) for x in w)

    def test_single_operand_intersection_becomes_union(self):
        node = _first((0, "intersection()"), (1, "sphere(r=2)"))
        policy = WarningPolicy(suppress=frozenset({"W02"}))
        assert translate_tag(node, warning_policy=policy) == "union3d"

    def test_single_operand_rewrite_as_error(self):
        node = _first((0, "intersection()"), (1, "sphere(r=2)"))
        policy = WarningPolicy(warn_as_error=frozenset({"W02"}))
        with pytest.raises(ValidationError, match="W02"):
            translate_tag(node, warning_policy=policy)

    def test_minkowski_single_operand_not_rewritten(self):
        node = _first((0, "minkowski()"), (1, "sphere(r=2)"))
        assert translate_tag(node) == "minkowski3d"

    def test_unresolved_wildcard(self):
        node = _first((0, "union()"))
        with pytest.raises(UnsupportedError, match="dimension could not be determined"):
            translate_tag(node)

    def test_unmapped_tag(self):
        node = _first((0, "mystery()"), (1, "sphere(r=1)"))
        with pytest.raises(UnsupportedError, match="Not supported : 'mystery'"):
            translate_tag(node, dimension=3)

    def test_not_applicable_tag(self):
        node = _first((0, 'surface(file="a.dat")'))
        with pytest.raises(UnsupportedError, match="Not supported : 'surface' --> N/A"):
            translate_tag(node, dimension=3)


class TestRootTag:
    def test_root_is_union(self):
        root = build_tree(records((0, "sphere(r=1)")))
        assert translate_root_tag(root) == "union3d"

    def test_root_2d(self):
        root = build_tree(records((0, "group()"), (0, "square(size=1,center=false)")))
        assert translate_root_tag(root) == "union2d"

    def test_empty_scene(self):
        root = build_tree(records((0, "group()")))
        with pytest.raises(UnsupportedError, match="no 2d or 3d geometry"):
            translate_root_tag(root)
