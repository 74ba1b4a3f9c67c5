# src/oscilab/systems/registry.py
from __future__ import annotations
from typing import Dict

from oscilab.errors import InvalidVariantError
from oscilab.runtime.types import Variant
from .base import SystemSpec

__all__ = ["register", "get_system", "registry", "ensure_complete"]

# variant -> spec instance
_registry: Dict[Variant, SystemSpec] = {}

def register(spec: SystemSpec) -> None:
    """
    Register a system spec under its variant tag.
    A variant may only be bound to one spec instance.
    """
    variant = spec.variant
    if variant in _registry and _registry[variant] is not spec:
        raise ValueError(f"System '{variant.value}' already registered with a different spec.")
    _registry[variant] = spec

def get_system(variant: Variant) -> SystemSpec:
    """
    Return the registered spec for 'variant' or raise InvalidVariantError.
    Strings are not accepted here; parse them with Variant.parse first.
    """
    if not isinstance(variant, Variant) or variant not in _registry:
        raise InvalidVariantError(variant, [v.value for v in _registry])
    return _registry[variant]

def registry() -> Dict[Variant, SystemSpec]:
    """
    Read-only-ish view (do not mutate externally).
    """
    return dict(_registry)

def ensure_complete() -> None:
    """
    Raise RuntimeError unless every Variant member has a registered system.
    """
    missing = [v.value for v in Variant if v not in _registry]
    if missing:
        raise RuntimeError(f"every Variant needs a registered system; missing: {', '.join(missing)}")
