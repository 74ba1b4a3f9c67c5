from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol
import numpy as np

from oscilab.runtime.types import Variant

__all__ = ["SystemSpec", "RhsFn", "PostprocessFn", "pack_params"]


class RhsFn(Protocol):
    """In-place vector field kernel: writes f(y) into dy."""
    def __call__(self, y: np.ndarray, dy: np.ndarray, params: np.ndarray) -> None: ...


# Applied once to the full (n_state, n_samples) block after integration.
PostprocessFn = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True)
class SystemSpec:
    """
    Static description of one system variant.

    Fields:
      - variant: the Variant tag this spec implements
      - title: human readable name (plots, CLI listings)
      - state_names: component names, in state-vector order
      - default_ic: initial condition used by fresh sessions and resets
      - rhs: numba-compatible kernel rhs(y, dy, params) with params = [eps, alpha, beta]
      - postprocess: optional whole-trajectory hook (e.g. domain clamping)
    """
    variant: Variant
    title: str
    state_names: tuple[str, ...]
    default_ic: tuple[float, ...]
    rhs: RhsFn
    postprocess: Optional[PostprocessFn] = None
    bounds: dict[str, tuple[float, float]] = field(default_factory=dict)

    @property
    def n_state(self) -> int:
        return len(self.state_names)

    def index_of(self, name: str) -> int:
        try:
            return self.state_names.index(name)
        except ValueError:
            raise KeyError(
                f"'{name}' is not a state of the {self.variant.value} system; "
                f"expected one of {list(self.state_names)}"
            ) from None


def pack_params(eps: float, alpha: float, beta: float) -> np.ndarray:
    """Pack physical coefficients into the float64 array the kernels expect."""
    return np.array([eps, alpha, beta], dtype=np.float64)
