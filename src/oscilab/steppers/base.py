from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Protocol
import numpy as np

from oscilab.runtime.types import Method

__all__ = [
    "StepperMeta", "StepperSpec", "StepFn", "Memory",
]

# Derivative carried between steps by multistep methods; None while cold.
Memory = Optional[np.ndarray]

# Frozen stepping ABI:
#     memory_next = stepper(dt, y_curr, rhs, params, memory, y_prop)
# y_prop receives the proposed state; y_curr and memory are never mutated.
StepFn = Callable[..., Memory]


@dataclass(frozen=True)
class StepperMeta:
    """
    Public metadata for a stepper.
    Fundamental classification of the method.
    """
    name: str
    method: Method
    family: str = ""
    order: int = 1
    stages: int = 1              # vector field evaluations per step
    multistep: bool = False      # carries a derivative between steps
    aliases: tuple[str, ...] = ()


class StepperSpec(Protocol):
    """
    Interface for stepper specs.
    Implementations MUST:
      - accept `meta: StepperMeta | None` in __init__
      - provide `emit(rhs_fn) -> StepFn` returning a stepping function with the
        frozen ABI above
    """

    meta: StepperMeta

    def __init__(self, meta: StepperMeta | None = None) -> None: ...

    def emit(self, rhs_fn: Callable) -> StepFn:
        """
        Generate a stepping function bound to nothing but its arguments.

        Args:
            rhs_fn: The vector field kernel rhs(y, dy, params) (for reference;
                the kernel is also passed on every call)

        Returns:
            stepper(dt, y_curr, rhs, params, memory, y_prop) -> memory_next
        """
        ...
