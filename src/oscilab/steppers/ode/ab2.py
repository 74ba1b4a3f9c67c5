"""
AB2 (Adams-Bashforth 2nd order, explicit, fixed-step) stepper implementation.

Two-step explicit multistep method with an explicit Euler startup step.
The previous derivative is threaded through the `memory` argument instead of
a persistent workspace.
"""
from __future__ import annotations
from typing import TYPE_CHECKING
import numpy as np

from ..base import StepperMeta
from oscilab.runtime.types import Method

if TYPE_CHECKING:
    from typing import Callable

__all__ = ["AB2Spec"]


class AB2Spec:
    """
    Explicit 2-step Adams-Bashforth method (order 2, fixed-step).

    Main formula (warm, previous derivative available):
        f_n = f(y_n)
        y_{n+1} = y_n + dt/2 * (3 f_n - f_{n-1})
        memory <- f_n

    Startup (cold, memory is None):
        y_1 = y_0 + dt * f(y_0)     (explicit Euler)
        memory <- f(y_0)

    Cold -> warm happens on the first step of every trajectory and never
    reverts; the simulator starts each run cold.
    """
    def __init__(self, meta: StepperMeta | None = None):
        if meta is None:
            meta = StepperMeta(
                name="adams",
                method=Method.ADAMS2,
                family="adams-bashforth",
                order=2,
                stages=1,
                multistep=True,
                aliases=("ab2", "adams2", "adams_bashforth_2"),
            )
        self.meta = meta

    def emit(self, rhs_fn: Callable) -> Callable:
        """
        Generate an AB2 stepping function.

        Returns:
            ab2_stepper(dt, y_curr, rhs, params, memory, y_prop) -> memory_next
            where memory_next is a fresh copy of f(y_curr).
        """
        def ab2_stepper(dt, y_curr, rhs, params, memory, y_prop):
            n = y_curr.size

            # f_curr = f(y_n); becomes the memory of the next call
            f_curr = np.empty(n, dtype=np.float64)
            rhs(y_curr, f_curr, params)

            # --- Startup step (Euler) ---
            if memory is None:
                for i in range(n):
                    y_prop[i] = y_curr[i] + dt * f_curr[i]
                return f_curr

            # --- Main AB2 step ---
            f_prev = memory
            for i in range(n):
                y_prop[i] = y_curr[i] + 0.5 * dt * (3.0 * f_curr[i] - f_prev[i])

            return f_curr

        return ab2_stepper


# Auto-register on module import
def _auto_register():
    from ..registry import register
    spec = AB2Spec()
    register(spec)

_auto_register()
