"""Tree nodes for .csg statements and pydantic schemas for primitive parameters."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

from csgxml.errors import ValidationError
from csgxml.params import parse_params
from csgxml.values import CsgValue
from csgxml.warning_policy import WarningPolicy


@dataclass(frozen=True)
class FunctionRecord:
    """One flattened statement: nesting level, source line and ``name(params)`` text."""

    level: int
    line_no: int
    text: str


@dataclass(eq=False)
class Node:
    level: int = -1
    line_no: int = 0
    func: str = "root()"
    params: dict[str, CsgValue] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    matrix: np.ndarray | None = None  # 4x4, row-major

    @classmethod
    def from_record(
        cls, record: FunctionRecord, *, warning_policy: WarningPolicy | None = None
    ) -> Node:
        """Create a node and parse its parameter list immediately."""
        node = cls(level=record.level, line_no=record.line_no, func=record.text)
        node.params = parse_params(node.params_text, record.line_no, warning_policy=warning_policy)
        return node

    @property
    def tag(self) -> str:
        index = self.func.find("(")
        return self.func if index < 0 else self.func[:index]

    @property
    def params_text(self) -> str:
        index = self.func.find("(")
        return "()" if index < 0 else self.func[index:]

    @property
    def is_root(self) -> bool:
        return self.level == -1

    def get_value(self, name: str) -> CsgValue:
        """Return a required parameter, raising if it is missing."""
        try:
            return self.params[name]
        except KeyError:
            raise ValidationError(
                f"parameter {name!r} not found for {self.tag}", line_no=self.line_no, func=self.func
            ) from None

    def get_scalar(self, name: str) -> str:
        return str(self.get_value(name))

    def get_optional(self, name: str) -> CsgValue | None:
        """Return a parameter, or None when it is absent or ``undef``."""
        value = self.params.get(name)
        if value is None or value.is_undef:
            return None
        return value


# ---------------------------------------------------------------------------
# Primitive parameter schemas
# ---------------------------------------------------------------------------


class _Params(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


def _require_positive(name: str, value: float) -> float:
    if value <= 0.0:
        raise ValueError(f"{name} must be > 0.0")
    return value


class RadiusParams(_Params):
    """circle and sphere."""

    r: float

    @field_validator("r")
    @classmethod
    def _positive(cls, v: float) -> float:
        return _require_positive("r", v)


class RectangleParams(_Params):
    dx: float
    dy: float
    center: str

    @field_validator("dx", "dy")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        return _require_positive(info.field_name, v)


class CuboidParams(_Params):
    dx: float
    dy: float
    dz: float
    center: str

    @field_validator("dx", "dy", "dz")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        return _require_positive(info.field_name, v)


class ConeParams(_Params):
    h: float
    r1: float
    r2: float
    center: str

    @field_validator("h")
    @classmethod
    def _positive_height(cls, v: float) -> float:
        return _require_positive("h", v)

    @field_validator("r1", "r2")
    @classmethod
    def _non_negative(cls, v: float, info: ValidationInfo) -> float:
        if v < 0.0:
            raise ValueError(f"{info.field_name} must be >= 0.0")
        return v

    @model_validator(mode="after")
    def _not_degenerate(self) -> ConeParams:
        if self.r1 + self.r2 <= 0.0:
            raise ValueError("r1+r2 must be > 0.0")
        return self


class OffsetParams(_Params):
    delta: float
    round: bool
    chamfer: str = "false"


class SweepParams(_Params):
    """linear_extrude; ``twist`` is in degrees as written in the .csg file."""

    height: float
    twist: float = 0.0
    slices: int | None = None
    center: str = "false"
    scale: tuple[float, float] = (1.0, 1.0)

    @field_validator("height")
    @classmethod
    def _positive(cls, v: float) -> float:
        return _require_positive("height", v)
