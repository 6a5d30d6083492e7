"""Custom exception hierarchy for the csgxml translator."""

from __future__ import annotations


class CsgXmlError(Exception):
    """Base exception for all csgxml errors.

    ``line_no`` and ``func`` identify the offending .csg statement when known.
    """

    def __init__(self, message: str, *, line_no: int | None = None, func: str | None = None):
        self.line_no = line_no
        self.func = func
        if line_no is not None:
            message = f".csg file line {line_no}: {message}"
        if func:
            message = f"{message}: {func}"
        super().__init__(message)


class ParseError(CsgXmlError):
    """Raised when .csg text, parameter lists or values are malformed."""


class ValidationError(CsgXmlError):
    """Raised when a construct has bad parameters or children."""


class UnsupportedError(CsgXmlError):
    """Raised for constructs xcsg cannot represent."""


class ExportError(CsgXmlError):
    """Raised when writing the xcsg document fails."""
