"""Click CLI entry point for csgxml."""

from __future__ import annotations

from pathlib import Path

import click

from csgxml import __version__
from csgxml.errors import CsgXmlError
from csgxml.lexer import tokenize_csg
from csgxml.translator import translate_csg
from csgxml.tree import build_tree, render_tree
from csgxml.warning_policy import WARNING_DESCRIPTIONS, WarningPolicy, parse_code_list

_CODES_HELP = ", ".join(f"{code} {text}" for code, text in WARNING_DESCRIPTIONS.items())


def _build_warning_policy(
    warn_as_error: str | None, suppress_warning: str | None
) -> WarningPolicy | None:
    """Parse CLI warning options into a WarningPolicy, or None if unset."""
    if warn_as_error is None and suppress_warning is None:
        return None
    try:
        wae = parse_code_list(warn_as_error) if warn_as_error else frozenset()
        sup = parse_code_list(suppress_warning) if suppress_warning else frozenset()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    return WarningPolicy(warn_as_error=wae, suppress=sup)


def _default_output(input_file: Path) -> Path:
    """``model.csg`` -> ``model.xcsg`` next to the input."""
    return input_file.with_suffix(".xcsg")


@click.group()
@click.version_option(version=__version__, prog_name="csgxml")
def main() -> None:
    """csgxml - translate OpenSCAD .csg files to xcsg XML."""


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output .xcsg path. Defaults to the input name with .xcsg extension.",
)
@click.option(
    "--warn-as-error",
    "warn_as_error",
    type=str,
    default=None,
    help=f"Comma-separated W-codes to treat as errors ({_CODES_HELP}).",
)
@click.option(
    "--suppress-warning",
    "suppress_warning",
    type=str,
    default=None,
    help="Comma-separated W-codes to suppress (e.g. W02).",
)
def convert(
    input_file: Path,
    output: Path | None,
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Convert an OpenSCAD .csg file to xcsg."""
    warning_policy = _build_warning_policy(warn_as_error, suppress_warning)
    if output is None:
        output = _default_output(input_file)

    try:
        document = translate_csg(input_file, warning_policy=warning_policy)
        document.write(output)
    except CsgXmlError as e:
        raise click.ClickException(str(e))

    click.echo(f"Converted: {output}")


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def dump(input_file: Path) -> None:
    """Print the statement tree of a .csg file with its parsed parameters."""
    try:
        root = build_tree(tokenize_csg(input_file))
    except CsgXmlError as e:
        raise click.ClickException(str(e))
    click.echo(render_tree(root), nl=False)
