"""
Three-state van der Pol type oscillator with slowly varying frequency.

    dx/dt = y
    dy/dt = -(1 + z^2) x + eps (alpha - x^2) y
    dz/dt = eps (x^2 - beta y^2)

The z component modulates the squared frequency of the (x, y) oscillation
and drifts on the slow time scale eps t.
"""
from __future__ import annotations
import numpy as np

from oscilab.runtime.types import Variant
from .base import SystemSpec

__all__ = ["oscillator_rhs", "OSCILLATOR"]


def oscillator_rhs(y: np.ndarray, dy: np.ndarray, params: np.ndarray) -> None:
    eps = params[0]
    alpha = params[1]
    beta = params[2]
    x = y[0]
    v = y[1]
    z = y[2]
    dy[0] = v
    dy[1] = -(1.0 + z * z) * x + eps * (alpha - x * x) * v
    dy[2] = eps * (x * x - beta * v * v)


OSCILLATOR = SystemSpec(
    variant=Variant.OSCILLATOR,
    title="Van der Pol type oscillator",
    state_names=("x", "y", "z"),
    default_ic=(1.0, 0.0, 0.0),
    rhs=oscillator_rhs,
)
