# src/oscilab/steppers/registry.py
from __future__ import annotations
from typing import Dict

from oscilab.errors import InvalidMethodError
from oscilab.runtime.types import Method
from .base import StepperSpec

__all__ = ["register", "get_stepper", "registry", "ensure_complete"]

# method -> spec instance
_registry: Dict[Method, StepperSpec] = {}

def register(spec: StepperSpec) -> None:
    """
    Register a stepper spec by its meta.method.
    Each Method member maps to exactly one spec instance.
    """
    method = spec.meta.method
    if method in _registry and _registry[method] is not spec:
        raise ValueError(f"Stepper '{method.value}' already registered with a different spec.")
    _registry[method] = spec

def get_stepper(method: Method) -> StepperSpec:
    """
    Return the registered spec for 'method' or raise InvalidMethodError.
    Strings are rejected: they must go through Method.parse at the boundary.
    """
    if not isinstance(method, Method) or method not in _registry:
        raise InvalidMethodError(method, [m.value for m in _registry])
    return _registry[method]

def registry() -> Dict[Method, StepperSpec]:
    """
    Read-only-ish view (do not mutate externally).
    """
    return dict(_registry)

def ensure_complete() -> None:
    """
    Raise RuntimeError unless every Method member has a registered stepper.
    """
    missing = [m.value for m in Method if m not in _registry]
    if missing:
        raise RuntimeError(f"every Method needs a registered stepper; missing: {', '.join(missing)}")
