"""Coded translation diagnostics and the policy that routes them."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from types import MappingProxyType

from csgxml.errors import ValidationError

WARNING_DESCRIPTIONS = MappingProxyType(
    {
        "W01": "parameter text after a closed vector was dropped",
        "W02": "single-operand difference/intersection rewritten to union",
        "W03": "statement with undetermined dimension dropped",
    }
)

KNOWN_CODES: frozenset[str] = frozenset(WARNING_DESCRIPTIONS)


class CsgXmlWarning(UserWarning):
    """Warning with a machine-readable code."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(f"[{code}] {message}")


@dataclass(frozen=True)
class WarningPolicy:
    """Per-code overrides: escalate to an error, or drop entirely."""

    warn_as_error: frozenset[str] = frozenset()
    suppress: frozenset[str] = frozenset()


def emit_warning(
    code: str,
    message: str,
    *,
    line_no: int | None = None,
    policy: WarningPolicy | None = None,
) -> None:
    """Report a diagnostic under ``code``.

    Suppressed codes are dropped, escalated codes raise ``ValidationError``
    and everything else becomes a ``CsgXmlWarning``.
    """
    if line_no is not None:
        message = f".csg file line {line_no}: {message}"

    if policy is not None:
        if code in policy.suppress:
            return
        if code in policy.warn_as_error:
            raise ValidationError(f"[{code}] {message}")

    warnings.warn(CsgXmlWarning(code, message), stacklevel=2)


def parse_code_list(raw: str) -> frozenset[str]:
    """Parse ``"W01,W03"`` into a set of known codes.

    Raises ``ValueError`` for unknown codes.
    """
    codes: set[str] = set()
    for token in raw.split(","):
        token = token.strip().upper()
        if not token:
            continue
        if token not in KNOWN_CODES:
            raise ValueError(f"Unknown warning code: {token!r} (known: {sorted(KNOWN_CODES)})")
        codes.add(token)
    return frozenset(codes)
