# src/oscilab/steppers/__init__.py
from __future__ import annotations
import numpy as np

from oscilab.runtime.types import Method, Variant
from oscilab.systems import get_system, pack_params
from .base import StepperMeta, StepperSpec, Memory
from .registry import register, get_stepper, registry, ensure_complete

# Import concrete steppers to trigger auto-registration
from .ode import euler, rk4, ab2

__all__ = [
    "StepperMeta", "StepperSpec", "Memory",
    "register", "get_stepper", "registry", "ensure_complete",
    "step",
]

ensure_complete()


def step(
    method: Method,
    state,
    memory: Memory,
    dt: float,
    eps: float,
    alpha: float,
    beta: float,
    *,
    variant: Variant,
) -> tuple[np.ndarray, Memory]:
    """
    Advance `state` by one signed increment `dt`.

    Convenience entry point for single steps; the simulator binds the stepper
    once and calls it directly in its loop.

    Returns:
        (next_state, memory_next). memory_next is None for Euler/RK4 and the
        derivative at `state` for Adams-Bashforth.
    """
    stepper = get_stepper(method)
    system = get_system(variant)
    y_curr = np.array(state, dtype=np.float64)
    if y_curr.shape != (system.n_state,):
        raise ValueError(
            f"{variant.value} state must have shape ({system.n_state},), got {y_curr.shape}"
        )
    y_prop = np.empty_like(y_curr)
    fn = stepper.emit(system.rhs)
    with np.errstate(over="ignore", invalid="ignore"):
        memory_next = fn(float(dt), y_curr, system.rhs, pack_params(eps, alpha, beta), memory, y_prop)
    return y_prop, memory_next
