# src/oscilab/errors.py
from __future__ import annotations
from typing import Any

__all__ = [
    "OscilabError",
    "InvalidParameterError",
    "InvalidMethodError",
    "InvalidVariantError",
    "ConfigError",
]

class OscilabError(Exception):
    """Base error for the oscilab package."""


class InvalidParameterError(OscilabError, ValueError):
    """Raised when a parameter value fails format or range validation."""
    def __init__(self, key: str, value: Any, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{key}': {value!r} ({reason})")


class InvalidMethodError(OscilabError, ValueError):
    """Raised when an unknown integration method reaches the stepper layer."""
    def __init__(self, method: Any, known: list[str] | None = None):
        self.method = method
        self.known = list(known or [])
        msg = f"Unknown integration method: {method!r}"
        if self.known:
            msg += f" (expected one of: {', '.join(self.known)})"
        super().__init__(msg)


class InvalidVariantError(OscilabError, ValueError):
    """Raised when an unknown system variant reaches the vector-field layer."""
    def __init__(self, variant: Any, known: list[str] | None = None):
        self.variant = variant
        self.known = list(known or [])
        msg = f"Unknown system variant: {variant!r}"
        if self.known:
            msg += f" (expected one of: {', '.join(self.known)})"
        super().__init__(msg)


class ConfigError(OscilabError):
    """Raised when configuration file is malformed or invalid."""
    def __init__(self, message: str):
        super().__init__(message)
