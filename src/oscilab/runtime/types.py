# src/oscilab/runtime/types.py
from __future__ import annotations
from enum import Enum

from oscilab.errors import InvalidMethodError, InvalidVariantError

__all__ = ["Variant", "Method"]


class Variant(str, Enum):
    """Which dynamical system a session integrates."""
    OSCILLATOR = "oscillator"
    AVERAGED = "averaged"

    @classmethod
    def parse(cls, value: "Variant | str") -> "Variant":
        """
        Convert a user-facing tag into a Variant.
        Raises InvalidVariantError for anything unrecognized.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = _VARIANT_ALIASES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        raise InvalidVariantError(value, [m.value for m in cls])


class Method(str, Enum):
    """Closed set of integration methods."""
    EULER = "euler"
    RK4 = "rk4"
    ADAMS2 = "adams"

    @classmethod
    def parse(cls, value: "Method | str") -> "Method":
        """
        Convert a user-facing tag into a Method.
        Raises InvalidMethodError for anything unrecognized; never falls back
        to a default method.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = _METHOD_ALIASES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        raise InvalidMethodError(value, [m.value for m in cls])


_VARIANT_ALIASES = {
    "vdp": "oscillator",
    "3d": "oscillator",
    "avg": "averaged",
    "2d": "averaged",
}

_METHOD_ALIASES = {
    "fwd_euler": "euler",
    "forward_euler": "euler",
    "rk4_classic": "rk4",
    "classical_rk4": "rk4",
    "adams2": "adams",
    "ab2": "adams",
    "adams_bashforth_2": "adams",
}
