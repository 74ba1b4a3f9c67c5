# src/oscilab/steppers/ode/rk4.py
"""
RK4 (Runge-Kutta 4th order, explicit, fixed-step) stepper implementation.
"""
from __future__ import annotations
from typing import TYPE_CHECKING
import numpy as np

from ..base import StepperMeta
from oscilab.runtime.types import Method

if TYPE_CHECKING:
    from typing import Callable

__all__ = ["RK4Spec"]


class RK4Spec:
    """
    Classic 4th-order Runge-Kutta stepper (explicit, fixed-step).

    Formula:
        k1 = f(y)
        k2 = f(y + dt/2 * k1)
        k3 = f(y + dt/2 * k2)
        k4 = f(y + dt * k3)
        y_{n+1} = y_n + dt/6 * (k1 + 2*k2 + 2*k3 + k4)

    The systems are autonomous, so stage times are not tracked.
    """
    def __init__(self, meta: StepperMeta | None = None):
        if meta is None:
            meta = StepperMeta(
                name="rk4",
                method=Method.RK4,
                family="runge-kutta",
                order=4,
                stages=4,
                multistep=False,
                aliases=("rk4_classic", "classical_rk4"),
            )
        self.meta = meta

    def emit(self, rhs_fn: Callable) -> Callable:
        """
        Generate an RK4 stepping function.

        Returns:
            rk4_stepper(dt, y_curr, rhs, params, memory, y_prop) -> memory
        """
        def rk4_stepper(dt, y_curr, rhs, params, memory, y_prop):
            # memory is ignored and passed through (RK4 is single-step)
            n = y_curr.size

            k1 = np.empty(n, dtype=np.float64)
            k2 = np.empty(n, dtype=np.float64)
            k3 = np.empty(n, dtype=np.float64)
            k4 = np.empty(n, dtype=np.float64)
            y_stage = np.empty(n, dtype=np.float64)

            # Stage 1: k1 = f(y)
            rhs(y_curr, k1, params)

            # Stage 2: k2 = f(y + dt/2 * k1)
            for i in range(n):
                y_stage[i] = y_curr[i] + 0.5 * dt * k1[i]
            rhs(y_stage, k2, params)

            # Stage 3: k3 = f(y + dt/2 * k2)
            for i in range(n):
                y_stage[i] = y_curr[i] + 0.5 * dt * k2[i]
            rhs(y_stage, k3, params)

            # Stage 4: k4 = f(y + dt * k3)
            for i in range(n):
                y_stage[i] = y_curr[i] + dt * k3[i]
            rhs(y_stage, k4, params)

            # Combine: y_prop = y + dt/6 * (k1 + 2*k2 + 2*k3 + k4)
            for i in range(n):
                y_prop[i] = y_curr[i] + (dt / 6.0) * (
                    k1[i] + 2.0 * k2[i] + 2.0 * k3[i] + k4[i]
                )

            return memory

        return rk4_stepper


# Auto-register on module import
def _auto_register():
    from ..registry import register
    spec = RK4Spec()
    register(spec)

_auto_register()
