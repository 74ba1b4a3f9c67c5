"""
Averaged (amplitude/phase) reduction of the oscillator.

    denom = (1 + u2^2)^(3/2)
    num   = 1 - (1 + beta) u2 + u2^2 - beta u2^3
    du1/dt = eps u1 (alpha - u1 num / (2 denom))
    du2/dt = eps u1 / sqrt(1 + u2^2) * (1 - beta - beta u2^2)

u1 tracks the slowly growing amplitude, u2 a bounded phase-like quantity.
Trajectories are clamped to the physical domain u1 in [0, 8], u2 in [-1, 1]
once integration is complete.
"""
from __future__ import annotations
import math
import numpy as np

from oscilab.runtime.types import Variant
from .base import SystemSpec

__all__ = ["averaged_rhs", "clamp_domain", "AVERAGED", "U1_BOUNDS", "U2_BOUNDS"]

U1_BOUNDS = (0.0, 8.0)
U2_BOUNDS = (-1.0, 1.0)


def averaged_rhs(y: np.ndarray, dy: np.ndarray, params: np.ndarray) -> None:
    eps = params[0]
    alpha = params[1]
    beta = params[2]
    u1 = y[0]
    u2 = y[1]
    s = 1.0 + u2 * u2
    denom = s ** 1.5
    num = 1.0 - (1.0 + beta) * u2 + u2 * u2 - beta * u2 * u2 * u2
    dy[0] = eps * u1 * (alpha - u1 * num / (2.0 * denom))
    dy[1] = (eps * u1 / math.sqrt(s)) * (1.0 - beta - beta * u2 * u2)


def clamp_domain(samples: np.ndarray) -> np.ndarray:
    """
    Clamp a full (2, n_samples) block to the averaged domain.
    NaN samples stay NaN (np.clip propagates them).
    """
    out = np.array(samples, dtype=np.float64, copy=True)
    np.clip(out[0], U1_BOUNDS[0], U1_BOUNDS[1], out=out[0])
    np.clip(out[1], U2_BOUNDS[0], U2_BOUNDS[1], out=out[1])
    return out


AVERAGED = SystemSpec(
    variant=Variant.AVERAGED,
    title="Averaged amplitude/phase system",
    state_names=("u1", "u2"),
    default_ic=(1.0, 0.0),
    rhs=averaged_rhs,
    postprocess=clamp_domain,
    bounds={"u1": U1_BOUNDS, "u2": U2_BOUNDS},
)
