"""Scalar and nested-vector parameter values from .csg statements."""

from __future__ import annotations

from dataclasses import dataclass

from csgxml.errors import ParseError, ValidationError

_TOKEN_STOP = frozenset(",]")


@dataclass(frozen=True)
class CsgValue:
    """One parameter value: a raw scalar token or a vector of values.

    Scalars keep their source text verbatim (numbers, ``true``, ``undef``,
    quoted strings) so they can be passed through to the output unchanged.
    """

    text: str | None = None
    items: tuple[CsgValue, ...] | None = None
    line_no: int = 0

    @property
    def is_vector(self) -> bool:
        return self.items is not None

    @property
    def is_undef(self) -> bool:
        return self.text == "undef"

    def __len__(self) -> int:
        return len(self.items) if self.items is not None else 1

    def __getitem__(self, index: int) -> CsgValue:
        if self.items is None:
            if index == 0:
                return self
            raise ValidationError(
                f"index {index} out of range for scalar value {self.text!r}", line_no=self.line_no
            )
        try:
            return self.items[index]
        except IndexError:
            raise ValidationError(
                f"index {index} out of range for vector {self} of size {len(self.items)}",
                line_no=self.line_no,
            ) from None

    def __iter__(self):
        if self.items is None:
            return iter((self,))
        return iter(self.items)

    def __str__(self) -> str:
        if self.items is None:
            return self.text or ""
        return "[" + ",".join(str(item) for item in self.items) + "]"

    def to_float(self) -> float:
        if self.items is not None:
            raise ValidationError(f"expected a number, got vector {self}", line_no=self.line_no)
        try:
            return float(self.text)
        except (TypeError, ValueError):
            raise ParseError(f"expected a number, got {self.text!r}", line_no=self.line_no) from None

    def to_int(self) -> int:
        return int(self.to_float())

    def to_bool(self) -> bool:
        """OpenSCAD truthiness: non-empty vectors, non-zero numbers, non-empty strings."""
        if self.items is not None:
            return len(self.items) > 0
        if self.text == "true":
            return True
        if self.text in ("false", "undef"):
            return False
        if self.text.startswith('"'):
            return len(self.text) > 2
        return self.to_float() != 0.0


def parse_value(text: str, line_no: int = 0) -> CsgValue:
    """Parse one parameter value such as ``10``, ``"abc"`` or ``[[1,2],[3,4]]``.

    Raises:
        ParseError: On empty, unbalanced or otherwise malformed value text.
    """
    reader = _ValueReader(text, line_no)
    value = reader.read()
    reader.skip_space()
    if not reader.at_end():
        raise ParseError(
            f"unexpected text {text[reader.pos:]!r} after value {text[: reader.pos]!r}",
            line_no=line_no,
        )
    return value


class _ValueReader:
    """Recursive-descent reader over a single value's text."""

    def __init__(self, text: str, line_no: int) -> None:
        self.text = text
        self.pos = 0
        self.line_no = line_no

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def skip_space(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def read(self) -> CsgValue:
        self.skip_space()
        if self.at_end():
            raise ParseError(f"missing value in {self.text!r}", line_no=self.line_no)
        c = self.text[self.pos]
        if c == "[":
            return self._read_vector()
        if c == '"':
            return self._read_string()
        return self._read_token()

    def _read_vector(self) -> CsgValue:
        self.pos += 1  # '['
        items: list[CsgValue] = []
        self.skip_space()
        if not self.at_end() and self.text[self.pos] == "]":
            self.pos += 1
            return CsgValue(items=(), line_no=self.line_no)

        while True:
            items.append(self.read())
            self.skip_space()
            if self.at_end():
                raise ParseError(f"unterminated vector in {self.text!r}", line_no=self.line_no)
            c = self.text[self.pos]
            self.pos += 1
            if c == "]":
                return CsgValue(items=tuple(items), line_no=self.line_no)
            if c != ",":
                raise ParseError(
                    f"unexpected {c!r} in vector {self.text!r}", line_no=self.line_no
                )

    def _read_string(self) -> CsgValue:
        start = self.pos
        self.pos += 1
        while not self.at_end():
            c = self.text[self.pos]
            if c == "\\":
                self.pos += 2
                continue
            self.pos += 1
            if c == '"':
                return CsgValue(text=self.text[start : self.pos], line_no=self.line_no)
        raise ParseError(f"unterminated string in {self.text!r}", line_no=self.line_no)

    def _read_token(self) -> CsgValue:
        start = self.pos
        while not self.at_end():
            c = self.text[self.pos]
            if c in _TOKEN_STOP or c.isspace():
                break
            self.pos += 1
        token = self.text[start : self.pos]
        if not token:
            raise ParseError(f"missing value in {self.text!r}", line_no=self.line_no)
        return CsgValue(text=token, line_no=self.line_no)
