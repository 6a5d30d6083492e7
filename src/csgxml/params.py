"""Split a statement's ``(name=value,...)`` text into named values."""

from __future__ import annotations

from csgxml.errors import ParseError
from csgxml.values import CsgValue, parse_value
from csgxml.warning_policy import WarningPolicy, emit_warning


def positional_name(index: int) -> str:
    """Synthesized name for an unnamed parameter, e.g. ``_p000``."""
    return f"_p{index:03d}"


def parse_params(
    params_text: str,
    line_no: int = 0,
    *,
    warning_policy: WarningPolicy | None = None,
) -> dict[str, CsgValue]:
    """Parse a parenthesized parameter list.

    Values may be nested vectors; only commas outside brackets and strings
    separate parameters. Unnamed parameters are keyed by their position.

    Raises:
        ParseError: On missing parentheses, unterminated vectors or strings,
            empty values or duplicate names.
    """
    remaining = _strip_parentheses(params_text, line_no)
    params: dict[str, CsgValue] = {}
    position = 0

    while remaining:
        name, value_start = _split_name(remaining)
        if name is None:
            name = positional_name(position)
        value_text, value_end = _scan_value(remaining, value_start, line_no)
        consumed = _consume_separator(remaining, value_end, line_no, warning_policy)

        if name in params:
            raise ParseError(f"duplicate parameter {name!r}", line_no=line_no, func=params_text)
        params[name] = parse_value(value_text, line_no)
        position += 1

        remaining = remaining[consumed:] if consumed < len(remaining) else ""

    return params


def _strip_parentheses(params_text: str, line_no: int) -> str:
    text = params_text.strip()
    if not (text.startswith("(") and text.endswith(")")):
        raise ParseError("parameter list must be enclosed in parentheses", line_no=line_no, func=text)
    return text[1:-1].strip()


def _split_name(text: str) -> tuple[str | None, int]:
    """Return ``(name, value_start)`` if the segment opens with ``name=``."""
    for i, c in enumerate(text):
        if c == "=":
            return text[:i].strip(), i + 1
        if c in ',["':
            break
    return None, 0


def _scan_value(text: str, start: int, line_no: int) -> tuple[str, int]:
    """Find the end of the value starting at ``start``.

    A value ends at a top-level comma (exclusive), at the bracket closing
    an outermost vector (inclusive), or at the end of the text.
    """
    depth = 0
    in_string = False
    i = start
    while i < len(text):
        c = text[i]
        if in_string:
            if c == "\\":
                i += 2
                continue
            if c == '"':
                in_string = False
        elif c == '"':
            in_string = True
        elif c == "[":
            depth += 1
        elif c == "]":
            depth -= 1
            if depth < 0:
                raise ParseError(f"unbalanced ']' in {text!r}", line_no=line_no)
            if depth == 0:
                return text[start : i + 1], i + 1
        elif c == "," and depth == 0:
            return text[start:i], i
        i += 1

    if in_string:
        raise ParseError(f"unterminated string in {text!r}", line_no=line_no)
    if depth > 0:
        raise ParseError(f"unterminated vector in {text!r}", line_no=line_no)
    return text[start:], len(text)


def _consume_separator(
    text: str, value_end: int, line_no: int, warning_policy: WarningPolicy | None
) -> int:
    """Index just past the separator following a value."""
    while value_end < len(text) and text[value_end].isspace():
        value_end += 1
    if value_end >= len(text):
        return len(text)
    if text[value_end] == ",":
        return value_end + 1

    comma = text.find(",", value_end)
    stop = len(text) if comma < 0 else comma
    emit_warning(
        "W01",
        f"dropped {text[value_end:stop]!r} after {text[:value_end]!r}",
        line_no=line_no,
        policy=warning_policy,
    )
    return len(text) if comma < 0 else comma + 1
