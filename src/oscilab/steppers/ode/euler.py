# src/oscilab/steppers/ode/euler.py
"""
Euler (explicit, fixed-step) stepper implementation.

Single RHS evaluation per step, no memory.
"""
from __future__ import annotations
from typing import TYPE_CHECKING
import numpy as np

from ..base import StepperMeta
from oscilab.runtime.types import Method

if TYPE_CHECKING:
    from typing import Callable

__all__ = ["EulerSpec"]

# NOTE: Never add NaN / Inf checks in fixed-step steppers!
# Divergence is recorded as data by the simulator.

class EulerSpec:
    """
    Explicit Euler stepper: y_{n+1} = y_n + dt * f(y_n)

    Fixed-step, order 1, explicit scheme.
    """
    def __init__(self, meta: StepperMeta | None = None):
        if meta is None:
            meta = StepperMeta(
                name="euler",
                method=Method.EULER,
                family="euler",
                order=1,
                stages=1,
                multistep=False,
                aliases=("fwd_euler", "forward_euler"),
            )
        self.meta = meta

    def emit(self, rhs_fn: Callable) -> Callable:
        """
        Generate an Euler stepping function.

        Returns:
            euler_stepper(dt, y_curr, rhs, params, memory, y_prop) -> memory
        """
        def euler_stepper(dt, y_curr, rhs, params, memory, y_prop):
            # Euler: y_prop = y_curr + dt * f(y_curr)
            # memory is passed through untouched (Euler keeps none)
            n = y_curr.size
            dy = np.empty(n, dtype=np.float64)

            rhs(y_curr, dy, params)

            for i in range(n):
                y_prop[i] = y_curr[i] + dt * dy[i]

            return memory

        return euler_stepper


# Auto-register on module import
def _auto_register():
    from ..registry import register
    spec = EulerSpec()
    register(spec)

_auto_register()
