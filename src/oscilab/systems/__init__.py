# src/oscilab/systems/__init__.py
from __future__ import annotations
import numpy as np

from oscilab.runtime.types import Variant
from .base import SystemSpec, pack_params
from .registry import register, get_system, registry, ensure_complete
from .oscillator import OSCILLATOR, oscillator_rhs
from .averaged import AVERAGED, averaged_rhs, clamp_domain

__all__ = [
    "SystemSpec", "pack_params",
    "register", "get_system", "registry", "ensure_complete",
    "OSCILLATOR", "AVERAGED",
    "oscillator_rhs", "averaged_rhs", "clamp_domain",
    "derivative",
]

register(OSCILLATOR)
register(AVERAGED)

ensure_complete()


def derivative(variant: Variant, state, eps: float, alpha: float, beta: float) -> np.ndarray:
    """
    Evaluate the instantaneous derivative of `variant` at `state`.

    Pure: `state` is not modified and a new array is returned. Non-finite
    results are returned as-is.
    """
    spec = get_system(variant)
    y = np.asarray(state, dtype=np.float64)
    if y.shape != (spec.n_state,):
        raise ValueError(
            f"{variant.value} state must have shape ({spec.n_state},), got {y.shape}"
        )
    dy = np.empty_like(y)
    with np.errstate(over="ignore", invalid="ignore"):
        spec.rhs(y, dy, pack_params(eps, alpha, beta))
    return dy
