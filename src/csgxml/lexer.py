"""Tokenize OpenSCAD .csg text into flat ``(level, line, "name(params)")`` records."""

from __future__ import annotations

import bisect
import re
from pathlib import Path

from csgxml.errors import ParseError
from csgxml.models import FunctionRecord

_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

# '!' root, '#' debug and '%' background only affect the OpenSCAD preview
_DISPLAY_MODIFIERS = frozenset("!#%")
_DISABLE_MODIFIER = "*"


def read_source_text(source: str | Path) -> str:
    """Read .csg content from a path, or treat a string as the content itself."""
    if isinstance(source, Path):
        try:
            return source.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(f"Cannot read file: {e}") from e
    return source


def tokenize_csg(source: str | Path) -> list[FunctionRecord]:
    """Flatten a .csg script into records in depth-first pre-order.

    Statements prefixed with ``*`` are disabled and produce no records,
    together with everything in their block.

    Raises:
        ParseError: On unbalanced braces or parentheses, unterminated strings
            or comments, or text that is not a statement.
    """
    return _Lexer(read_source_text(source)).run()


class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._newlines = [m.start() for m in re.finditer("\n", text)]

    def line_at(self, pos: int) -> int:
        return bisect.bisect_left(self._newlines, pos) + 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def error(self, message: str, pos: int | None = None) -> ParseError:
        return ParseError(message, line_no=self.line_at(self.pos if pos is None else pos))

    def skip_trivia(self) -> None:
        """Skip whitespace and comments."""
        text = self.text
        while not self.at_end():
            c = text[self.pos]
            if c.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end < 0:
                    raise self.error("unterminated comment")
                self.pos = end + 2
            else:
                return

    def run(self) -> list[FunctionRecord]:
        records: list[FunctionRecord] = []
        level = 0
        disabled_level: int | None = None  # level of the open '*' block, if any
        open_braces: list[int] = []

        while True:
            self.skip_trivia()
            if self.at_end():
                break

            c = self.peek()
            if c == "}":
                if level == 0:
                    raise self.error("unbalanced '}'")
                open_braces.pop()
                self.pos += 1
                level -= 1
                if disabled_level == level:
                    disabled_level = None
                continue
            if c == ";":
                self.pos += 1
                continue

            disabled = self._read_modifiers()
            start = self.pos
            func = self._read_statement()
            self.skip_trivia()
            if self.at_end():
                raise self.error(f"expected ';' or '{{' after {func}")

            if not disabled and disabled_level is None:
                records.append(FunctionRecord(level, self.line_at(start), func))

            terminator = self.peek()
            self.pos += 1
            if terminator == "{":
                if disabled and disabled_level is None:
                    disabled_level = level
                open_braces.append(start)
                level += 1
            elif terminator != ";":
                raise self.error(f"expected ';' or '{{' after {func}, found {terminator!r}")

        if open_braces:
            raise self.error("unbalanced '{'", pos=open_braces[-1])
        return records

    def _read_modifiers(self) -> bool:
        disabled = False
        while not self.at_end():
            c = self.peek()
            if c == _DISABLE_MODIFIER:
                disabled = True
            elif c not in _DISPLAY_MODIFIERS:
                break
            self.pos += 1
            self.skip_trivia()
        return disabled

    def _read_statement(self) -> str:
        """Read ``name(args)``, dropping whitespace outside string literals."""
        match = _IDENTIFIER.match(self.text, self.pos)
        if match is None:
            found = self.peek() if not self.at_end() else "end of input"
            raise self.error(f"expected a statement, found {found!r}")
        name = match.group()
        self.pos = match.end()

        self.skip_trivia()
        if self.at_end() or self.peek() != "(":
            raise self.error(f"expected '(' after {name!r}")

        start = self.pos
        parts: list[str] = []
        depth = 0
        while not self.at_end():
            c = self.peek()
            if c == '"':
                parts.append(self._read_string())
                continue
            self.pos += 1
            if c.isspace():
                continue
            parts.append(c)
            if c == "(":
                depth += 1
            elif c == ")":
                depth -= 1
                if depth == 0:
                    return name + "".join(parts)
        raise self.error(f"unbalanced '(' in {name!r}", pos=start)

    def _read_string(self) -> str:
        start = self.pos
        self.pos += 1
        while not self.at_end():
            c = self.peek()
            if c == "\\":
                self.pos += 2
                continue
            self.pos += 1
            if c == '"':
                return self.text[start : self.pos]
        raise self.error("unterminated string", pos=start)
