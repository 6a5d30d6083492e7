"""Tests for the CLI entry point."""

from click.testing import CliRunner

from csgxml import __version__
from csgxml.cli import main


class TestCLI:
    def test_version_flag(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_convert(self, cube_csg, tmp_path):
        input_file = tmp_path / "cube.csg"
        input_file.write_text(cube_csg)
        output_file = tmp_path / "out.xcsg"
        result = CliRunner().invoke(main, ["convert", str(input_file), "-o", str(output_file)])
        assert result.exit_code == 0, result.output
        assert "Converted" in result.output
        assert "<cuboid" in output_file.read_text(encoding="utf-8")

    def test_convert_default_output(self, cube_csg, tmp_path):
        input_file = tmp_path / "model.csg"
        input_file.write_text(cube_csg)
        result = CliRunner().invoke(main, ["convert", str(input_file)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "model.xcsg").exists()

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, ["convert", str(tmp_path / "missing.csg")])
        assert result.exit_code != 0

    def test_translation_error(self, tmp_path):
        input_file = tmp_path / "bad.csg"
        input_file.write_text("sphere(r = 0);\n")
        result = CliRunner().invoke(main, ["convert", str(input_file)])
        assert result.exit_code != 0
        assert "Error" in result.output
        assert "line 1" in result.output
        assert not (tmp_path / "bad.xcsg").exists()

    def test_warn_as_error(self, tmp_path):
        input_file = tmp_path / "single.csg"
        input_file.write_text("difference() {\n  sphere(r = 1);\n}\n")
        result = CliRunner().invoke(main, ["convert", str(input_file), "--warn-as-error", "W02"])
        assert result.exit_code != 0
        assert "W02" in result.output

    def test_suppress_warning(self, tmp_path):
        input_file = tmp_path / "single.csg"
        input_file.write_text("difference() {\n  sphere(r = 1);\n}\n")
        result = CliRunner().invoke(main, ["convert", str(input_file), "--suppress-warning", "W02"])
        assert result.exit_code == 0, result.output

    def test_unknown_warning_code(self, cube_csg, tmp_path):
        input_file = tmp_path / "cube.csg"
        input_file.write_text(cube_csg)
        result = CliRunner().invoke(main, ["convert", str(input_file), "--warn-as-error", "W42"])
        assert result.exit_code != 0
        assert "Unknown warning code" in result.output

    def test_dump(self, cube_csg, tmp_path):
        input_file = tmp_path / "cube.csg"
        input_file.write_text(cube_csg)
        result = CliRunner().invoke(main, ["dump", str(input_file)])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "group"
        assert lines[1].startswith(" multmatrix _p000=[[1,0,0,5],")
        assert lines[2] == "  cube center=false size=[1,2,3]"
