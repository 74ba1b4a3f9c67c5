# src/oscilab/runtime/params.py
from __future__ import annotations

from dataclasses import dataclass, fields, replace
import math
import numbers
import re
from typing import Any, Optional

from oscilab.errors import InvalidParameterError

__all__ = [
    "Parameters",
    "PARAM_ALIASES",
    "canonical_key",
    "parse_value",
    "steps_for",
    "validate_field",
]

# Greek names from the equations and legacy form keys.
PARAM_ALIASES = {
    "ε": "eps",
    "epsilon": "eps",
    "α": "alpha",
    "β": "beta",
    "steps": "step_count",
    "intTime": "int_time",
    "int-time": "int_time",
}

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


@dataclass(frozen=True)
class Parameters:
    """
    Physical coefficients and integration controls for one trajectory.

    Fields:
      - eps, alpha, beta: coefficients of the vector fields
      - dt: signed step; the sign selects the time direction
      - int_time: integration horizon (>= 0), used to derive the step count
      - step_count: explicit step count (>= 0); overrides int_time when set

    Instances are immutable. Use `with_field` for a validated copy.
    """
    eps: float = 0.05
    alpha: float = 1.0
    beta: float = 0.9
    dt: float = 0.001
    int_time: float = 10.0
    step_count: Optional[int] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, validate_field(f.name, getattr(self, f.name)))

    @property
    def n_steps(self) -> int:
        """Number of steps a run with these parameters performs."""
        if self.step_count is not None:
            return int(self.step_count)
        return steps_for(self.int_time, self.dt)

    @property
    def coefficients(self) -> tuple[float, float, float]:
        return (self.eps, self.alpha, self.beta)

    def with_field(self, key: str, value: Any) -> Parameters:
        """
        Return a copy with one field replaced.
        Raises InvalidParameterError and leaves `self` untouched on bad input.
        """
        name = canonical_key(key)
        value = validate_field(name, value)
        return replace(self, **{name: value})

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def steps_for(int_time: float, dt: float) -> int:
    """
    Number of steps covering `int_time` with step `dt`.

    A fractional quotient is rounded up so the horizon is always reached;
    quotients within round-off of an integer are taken as that integer
    (10 / 0.001 gives 10000, 10 / 0.003 gives 3334).
    """
    quotient = abs(int_time / dt)
    if not math.isfinite(quotient):
        raise InvalidParameterError(
            "int_time", int_time, f"int_time / dt is not finite for dt={dt!r}"
        )
    nearest = round(quotient)
    if math.isclose(quotient, nearest, rel_tol=1e-9, abs_tol=1e-12):
        return int(nearest)
    return int(math.ceil(quotient))


def canonical_key(key: str) -> str:
    name = PARAM_ALIASES.get(key, key)
    if name not in _FIELD_NAMES:
        raise InvalidParameterError(key, None, f"unknown parameter; expected one of {sorted(_FIELD_NAMES)}")
    return name


def validate_field(name: str, value: Any) -> Any:
    """Check one Parameters field and return its normalized value."""
    if name == "step_count":
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidParameterError(name, value, "must be an integer")
        if not isinstance(value, numbers.Integral) and not float(value).is_integer():
            raise InvalidParameterError(name, value, "must be an integer")
        if value < 0:
            raise InvalidParameterError(name, value, "must be non-negative")
        return int(value)

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(name, value, "must be a real number")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(name, value, "must be finite")
    if name == "dt" and value == 0.0:
        raise InvalidParameterError(name, value, "must be non-zero")
    if name == "int_time" and value < 0.0:
        raise InvalidParameterError(name, value, "must be non-negative")
    return value


def parse_value(raw: str, key: str = "value", min_value: Optional[float] = None) -> float:
    """
    Convert raw text typed by a user into a float.

    Accepts plain decimal notation only (an optional leading minus, digits,
    and an optional fractional part), the same format the editing forms
    accept. Raises InvalidParameterError with a readable reason otherwise.
    """
    text = raw.strip() if isinstance(raw, str) else raw
    if not isinstance(text, str):
        raise InvalidParameterError(key, raw, "expected text input")
    if text == "":
        raise InvalidParameterError(key, raw, "field cannot be empty")
    if not _NUMBER_RE.match(text):
        raise InvalidParameterError(key, raw, "invalid number format")
    parsed = float(text)
    if min_value is not None and parsed < min_value:
        raise InvalidParameterError(key, raw, f"value cannot be less than {min_value}")
    return parsed


_FIELD_NAMES = frozenset(f.name for f in fields(Parameters))
