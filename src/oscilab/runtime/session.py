# src/oscilab/runtime/session.py
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence
import warnings

import numpy as np

from oscilab.errors import InvalidParameterError
from oscilab.systems import SystemSpec, get_system
from .guards import allfinite1d
from .params import Parameters, canonical_key
from .simulator import as_state, run
from .trajectory import Trajectory
from .types import Method, Variant

__all__ = ["TrajectorySession", "DEFAULT_COLOR", "DEFAULT_LINE_WIDTH"]

DEFAULT_COLOR = "#aabbcc"
DEFAULT_LINE_WIDTH = 2.0


class TrajectorySession:
    """
    Ordered collection of trajectories for one view, plus the live
    parameters, method and initial state used for the next computation.

    Invariants:
      - insertion order is display order
      - after add_trajectory(), initial_state equals the last sample of the
        trajectory just added (chaining)
      - removing a trajectory never touches the samples of the others
      - trajectories are never recomputed when parameters change
    """

    def __init__(
        self,
        variant: Variant | str,
        *,
        params: Optional[Parameters] = None,
        method: Method | str = Method.EULER,
        initial_state: Optional[Sequence[float]] = None,
        color: str = DEFAULT_COLOR,
        line_width: float = DEFAULT_LINE_WIDTH,
        jit: bool = False,
    ) -> None:
        self.variant = Variant.parse(variant)
        self.system: SystemSpec = get_system(self.variant)
        self.jit = bool(jit)

        self._default_params = params if params is not None else Parameters()
        self._default_ic = (
            self._check_initial(initial_state)
            if initial_state is not None
            else np.array(self.system.default_ic, dtype=np.float64)
        )
        self._default_method = Method.parse(method)
        self._default_display = (color, float(line_width))

        self._params = self._default_params
        self._initial = self._default_ic.copy()
        self._method = self._default_method
        self.color, self.line_width = self._default_display
        self._trajectories: list[Trajectory] = []
        self._reset_key = 0

    # ---------------- read-only state ----------------

    @property
    def params(self) -> Parameters:
        return self._params

    @property
    def method(self) -> Method:
        return self._method

    @property
    def initial_state(self) -> np.ndarray:
        """Copy of the initial state the next trajectory starts from."""
        return self._initial.copy()

    @property
    def trajectories(self) -> tuple[Trajectory, ...]:
        return tuple(self._trajectories)

    @property
    def reset_key(self) -> int:
        """Incremented by every reset; editors drop their undo history when it changes."""
        return self._reset_key

    def __len__(self) -> int:
        return len(self._trajectories)

    def __iter__(self):
        return iter(tuple(self._trajectories))

    def __getitem__(self, index: int) -> Trajectory:
        return self._trajectories[index]

    # ---------------- computation ----------------

    def add_trajectory(
        self,
        color: Optional[str] = None,
        line_width: Optional[float] = None,
    ) -> Trajectory:
        """
        Compute a trajectory from the current state, append it, and chain:
        the initial state becomes the trajectory's last sample.
        """
        traj = run(
            self.variant,
            self._method,
            self._params,
            self._initial,
            jit=self.jit,
            color=self.color if color is None else color,
            line_width=self.line_width if line_width is None else float(line_width),
        )
        self._trajectories.append(traj)
        if len(traj) > 0:
            self._initial = traj.last
            if not allfinite1d(self._initial):
                warnings.warn(
                    f"Trajectory diverged at sample {traj.divergence_index}; "
                    "the chained initial state is not finite.",
                    RuntimeWarning,
                    stacklevel=2,
                )
        return traj

    # ---------------- removal ----------------

    def remove_trajectory(self, index: int) -> None:
        """Remove the trajectory at `index`. Out-of-range indices are ignored."""
        if 0 <= index < len(self._trajectories):
            del self._trajectories[index]

    def remove_last(self) -> None:
        if self._trajectories:
            self._trajectories.pop()

    def remove_all(self) -> None:
        """Drop every trajectory; parameters and initial state are kept."""
        self._trajectories.clear()

    # ---------------- edits ----------------

    def update_parameter(self, key: str, value: Any) -> Parameters:
        """
        Replace one Parameters field. On InvalidParameterError the previous
        parameters stay in place.
        """
        self._params = self._params.with_field(key, value)
        return self._params

    def update_parameters(self, values: Mapping[str, Any]) -> Parameters:
        """Apply several fields at once; all-or-nothing."""
        new = self._params
        for key, value in values.items():
            new = new.with_field(key, value)
        self._params = new
        return self._params

    def set_method(self, method: Method | str) -> Method:
        self._method = Method.parse(method)
        return self._method

    def set_initial_state(self, values: Sequence[float]) -> np.ndarray:
        self._initial = self._check_initial(values)
        return self.initial_state

    def update_initial(self, name: str, value: float) -> np.ndarray:
        """Set one component of the initial state by name (e.g. 'x' or 'u2')."""
        try:
            idx = self.system.index_of(name)
        except KeyError as exc:
            raise InvalidParameterError(name, value, str(exc.args[0])) from None
        new = self._initial.copy()
        new[idx] = value
        return self.set_initial_state(new)

    def set_display(self, *, color: Optional[str] = None, line_width: Optional[float] = None) -> None:
        if color is not None:
            self.color = color
        if line_width is not None:
            width = float(line_width)
            if not width > 0.0:
                raise InvalidParameterError("line_width", line_width, "must be positive")
            self.line_width = width

    # ---------------- resets ----------------

    def reset_values(self) -> None:
        """Restore default parameters, initial state and display metadata."""
        self._params = self._default_params
        self._initial = self._default_ic.copy()
        self.color, self.line_width = self._default_display
        self._reset_key += 1

    def reset_initial_state(self) -> None:
        self._initial = self._default_ic.copy()
        self._reset_key += 1

    # ---------------- helpers ----------------

    def value_of(self, key: str) -> float:
        """Current value of a parameter or initial-state component."""
        if key in self.system.state_names:
            return float(self._initial[self.system.index_of(key)])
        name = canonical_key(key)
        return getattr(self._params, name)

    def summary(self) -> dict[str, Any]:
        return {
            "variant": self.variant.value,
            "method": self._method.value,
            "params": self._params.as_dict(),
            "initial_state": dict(zip(self.system.state_names, self._initial.tolist())),
            "trajectories": len(self._trajectories),
        }

    def _check_initial(self, values) -> np.ndarray:
        y = as_state(values, self.system.n_state)
        if not allfinite1d(y):
            raise InvalidParameterError("initial_state", values, "components must be finite")
        return y
