from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Optional
import numpy as np

from .guards import first_nonfinite
from .params import Parameters
from .types import Method, Variant

__all__ = ["Trajectory"]


@dataclass(frozen=True, eq=False)
class Trajectory:
    """
    Immutable record of one integration run.

    Fields:
      - samples: float64 array, shape (n_state, n_samples); states are rows,
        sample k is column k. Column 0 is the initial state. Read-only.
      - state_names: component names in row order
      - variant, method, params: what produced the samples
      - color, line_width: display metadata supplied by the caller; never
        interpreted here

    Notes:
      - Component access: traj["x"], traj.component("u2"), or traj.columns()
        for a name -> view mapping.
      - Non-finite samples are kept (divergence is data); use finite_mask()
        or diverged to filter.
    """
    samples: np.ndarray
    state_names: tuple[str, ...]
    variant: Variant
    method: Method
    params: Parameters
    color: Optional[str] = None
    line_width: Optional[float] = None

    def __post_init__(self) -> None:
        arr = self.samples
        if not (isinstance(arr, np.ndarray) and arr.dtype == np.float64 and not arr.flags.writeable):
            arr = np.array(arr, dtype=np.float64, copy=True)
        if arr.ndim != 2 or arr.shape[0] != len(self.state_names):
            raise ValueError(
                f"samples must have shape ({len(self.state_names)}, n); got {arr.shape}"
            )
        arr.flags.writeable = False
        object.__setattr__(self, "samples", arr)

    # ---------------- views ----------------

    def __len__(self) -> int:
        return int(self.samples.shape[1])

    def __getitem__(self, name: str) -> np.ndarray:
        return self.component(name)

    def component(self, name: str) -> np.ndarray:
        try:
            idx = self.state_names.index(name)
        except ValueError:
            raise KeyError(f"No component '{name}'; available: {list(self.state_names)}") from None
        return self.samples[idx]

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not regular attributes.
        state_names = self.__dict__.get("state_names", ())
        if name in state_names:
            return self.samples[state_names.index(name)]
        raise AttributeError(name)

    def columns(self) -> dict[str, np.ndarray]:
        return {name: self.samples[i] for i, name in enumerate(self.state_names)}

    @property
    def first(self) -> np.ndarray:
        return self.samples[:, 0].copy()

    @property
    def last(self) -> np.ndarray:
        """Final state as a fresh (writable) array."""
        return self.samples[:, -1].copy()

    # --------------- divergence helpers ---------------

    def finite_mask(self) -> np.ndarray:
        """Boolean mask over samples: True where every component is finite."""
        return np.isfinite(self.samples).all(axis=0)

    @property
    def diverged(self) -> bool:
        return first_nonfinite(self.samples) >= 0

    @property
    def divergence_index(self) -> int:
        """Index of the first non-finite sample, or -1."""
        return first_nonfinite(self.samples)

    # --------------- display ---------------

    def with_display(self, *, color: Optional[str] = None, line_width: Optional[float] = None) -> Trajectory:
        """Copy carrying different display metadata; samples are shared."""
        return replace(
            self,
            color=self.color if color is None else color,
            line_width=self.line_width if line_width is None else line_width,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {name: arr.tolist() for name, arr in self.columns().items()}
        data["color"] = self.color
        data["line_width"] = self.line_width
        return data
