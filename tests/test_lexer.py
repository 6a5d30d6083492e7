"""Tests for the .csg tokenizer."""

import pytest

from csgxml.errors import ParseError
from csgxml.lexer import tokenize_csg
from csgxml.models import FunctionRecord


class TestTokenize:
    def test_fixture(self, cube_csg):
        assert tokenize_csg(cube_csg) == [
            FunctionRecord(0, 1, "group()"),
            FunctionRecord(1, 2, "multmatrix([[1,0,0,5],[0,1,0,0],[0,0,1,0],[0,0,0,1]])"),
            FunctionRecord(2, 3, "cube(size=[1,2,3],center=false)"),
        ]

    def test_empty_source(self):
        assert tokenize_csg("") == []
        assert tokenize_csg("  \n// nothing\n") == []

    def test_empty_block_and_leaf(self):
        recs = tokenize_csg("group() {}\ngroup();\n")
        assert recs == [FunctionRecord(0, 1, "group()"), FunctionRecord(0, 2, "group()")]

    def test_siblings_after_block(self):
        recs = tokenize_csg("union() {\n  cube(size = 1, center = true);\n}\nsphere(r = 1);\n")
        assert [(r.level, r.line_no) for r in recs] == [(0, 1), (1, 2), (0, 4)]

    def test_string_whitespace_preserved(self):
        (rec,) = tokenize_csg('text(text = "a b;{c}", size = 10);')
        assert rec.text == 'text(text="a b;{c}",size=10)'

    def test_comments_skipped(self):
        recs = tokenize_csg("/* header\n comment */\nsphere(r = 1); // trailing\n")
        assert recs == [FunctionRecord(0, 3, "sphere(r=1)")]

    def test_multiline_statement_reports_first_line(self):
        (rec,) = tokenize_csg("polyhedron(\n  points = [[0,0,0]],\n  faces = [[0]]);\n")
        assert rec.line_no == 1
        assert rec.text == "polyhedron(points=[[0,0,0]],faces=[[0]])"

    def test_display_modifiers_stripped(self):
        recs = tokenize_csg("%cube(size = 1, center = true);\n# sphere(r = 1);\n")
        assert [r.text for r in recs] == ["cube(size=1,center=true)", "sphere(r=1)"]

    def test_disabled_subtree_dropped(self):
        src = "*union() {\n  cube(size = 1, center = true);\n}\nsphere(r = 1);\n"
        assert tokenize_csg(src) == [FunctionRecord(0, 4, "sphere(r=1)")]

    def test_from_path(self, tmp_path, cube_csg):
        f = tmp_path / "model.csg"
        f.write_text(cube_csg)
        assert len(tokenize_csg(f)) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="Cannot read"):
            tokenize_csg(tmp_path / "missing.csg")


class TestLexerErrors:
    def test_unbalanced_close(self):
        with pytest.raises(ParseError, match="line 2.*unbalanced '}'"):
            tokenize_csg("cube(size = 1, center = true);\n}\n")

    def test_unbalanced_open(self):
        with pytest.raises(ParseError, match="line 1.*unbalanced '\\{'"):
            tokenize_csg("group() {\n  sphere(r = 1);\n")

    def test_missing_terminator(self):
        with pytest.raises(ParseError, match="expected ';'"):
            tokenize_csg("sphere(r = 1) cube(size = 1);")

    def test_unbalanced_parenthesis(self):
        with pytest.raises(ParseError, match="unbalanced '\\('"):
            tokenize_csg("sphere(r = (1);")

    def test_assignment_rejected(self):
        with pytest.raises(ParseError, match=r"expected '\(' after '\$fn'"):
            tokenize_csg("$fn = 10;")

    def test_not_a_statement(self):
        with pytest.raises(ParseError, match="expected a statement"):
            tokenize_csg("[1, 2];")

    def test_unterminated_comment(self):
        with pytest.raises(ParseError, match="unterminated comment"):
            tokenize_csg("/* open")

    def test_unterminated_string(self):
        with pytest.raises(ParseError, match="unterminated string"):
            tokenize_csg('text(text = "abc);')
