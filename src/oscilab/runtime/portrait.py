# src/oscilab/runtime/portrait.py
"""
Phase portrait of the averaged system.

A regular grid of initial conditions spanning the averaged domain
(u1 in [0, 8], u2 in [-1, 1]) is integrated with one shared set of
parameters; every grid point contributes one trajectory. Grid points are
generated u1-major (all u2 values for the first u1, then the next u1) and the
grid is truncated to `max_points`.
"""
from __future__ import annotations

import math
import numbers
from typing import Any, Optional

import numpy as np

from oscilab.errors import InvalidParameterError
from oscilab.systems.averaged import U1_BOUNDS, U2_BOUNDS
from .params import Parameters
from .session import DEFAULT_COLOR, DEFAULT_LINE_WIDTH
from .simulator import run
from .trajectory import Trajectory
from .types import Method, Variant

__all__ = [
    "PhasePortrait",
    "phase_portrait",
    "portrait_grid",
    "PORTRAIT_PARAMS",
    "MIN_AXIS_STEP",
    "MAX_POINTS",
    "MIN_LENGTH",
]

MIN_AXIS_STEP = 0.05
MAX_POINTS = 500
# Trajectories with this many samples or fewer are left out of the portrait.
MIN_LENGTH = 50
DEFAULT_X_STEP = 0.5
DEFAULT_Y_STEP = 0.1

PORTRAIT_PARAMS = Parameters(eps=1.0, alpha=1.0, beta=0.9, dt=0.01, step_count=1000)

_AXIS_KEYS = {"x_step": "x_step", "xStep": "x_step", "y_step": "y_step", "yStep": "y_step"}


def _check_axis_step(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(name, value, "must be a real number")
    step = float(value)
    if not math.isfinite(step):
        raise InvalidParameterError(name, value, "must be finite")
    if step < MIN_AXIS_STEP:
        raise InvalidParameterError(name, value, f"value cannot be less than {MIN_AXIS_STEP}")
    return step


def _check_max_points(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise InvalidParameterError("max_points", value, "must be a non-negative integer")
    return int(value)


def _axis(lo: float, hi: float, step: float) -> np.ndarray:
    # lo, lo + step, ... up to hi inclusive; the slack absorbs round-off
    count = int(math.floor((hi - lo) / step + 1e-9)) + 1
    return lo + step * np.arange(count, dtype=np.float64)


def portrait_grid(x_step: float, y_step: float, max_points: int = MAX_POINTS) -> np.ndarray:
    """
    Initial conditions of a phase portrait as an array of shape (n, 2).

    Raises InvalidParameterError when a step is below MIN_AXIS_STEP or
    max_points is negative.
    """
    x_step = _check_axis_step("x_step", x_step)
    y_step = _check_axis_step("y_step", y_step)
    max_points = _check_max_points(max_points)

    u1 = _axis(U1_BOUNDS[0], U1_BOUNDS[1], x_step)
    u2 = _axis(U2_BOUNDS[0], U2_BOUNDS[1], y_step)
    grid = np.stack(np.meshgrid(u1, u2, indexing="ij"), axis=-1).reshape(-1, 2)
    return grid[:max_points]


def phase_portrait(
    params: Optional[Parameters] = None,
    method: Method = Method.EULER,
    x_step: float = DEFAULT_X_STEP,
    y_step: float = DEFAULT_Y_STEP,
    *,
    max_points: int = MAX_POINTS,
    min_length: int = MIN_LENGTH,
    jit: bool = False,
    color: Optional[str] = None,
    line_width: Optional[float] = None,
) -> list[Trajectory]:
    """
    Integrate the averaged system from every point of the portrait grid.

    Args:
        params: shared parameters (default PORTRAIT_PARAMS)
        method: integration method for every trajectory
        x_step, y_step: grid spacing along u1 and u2 (>= MIN_AXIS_STEP)
        max_points: cap on the number of grid points
        min_length: trajectories with len(traj) <= min_length are dropped
        jit, color, line_width: forwarded to `run`

    Returns:
        Trajectories in grid order, each clamped to the averaged domain.
    """
    params = PORTRAIT_PARAMS if params is None else params
    grid = portrait_grid(x_step, y_step, max_points)
    out: list[Trajectory] = []
    for point in grid:
        traj = run(
            Variant.AVERAGED, method, params, point,
            jit=jit, color=color, line_width=line_width,
        )
        if len(traj) > min_length:
            out.append(traj)
    return out


class PhasePortrait:
    """
    Live phase portrait view: parameters, grid spacing and display color,
    plus the trajectories of the last `compute()`.

    Unlike TrajectorySession there is no chaining; every computation replaces
    the whole set of trajectories.
    """

    variant = Variant.AVERAGED

    def __init__(
        self,
        *,
        params: Optional[Parameters] = None,
        method: Method | str = Method.EULER,
        x_step: float = DEFAULT_X_STEP,
        y_step: float = DEFAULT_Y_STEP,
        max_points: int = MAX_POINTS,
        color: str = DEFAULT_COLOR,
        line_width: float = DEFAULT_LINE_WIDTH,
        jit: bool = False,
    ) -> None:
        self._default_params = PORTRAIT_PARAMS if params is None else params
        self._default_steps = (
            _check_axis_step("x_step", x_step),
            _check_axis_step("y_step", y_step),
        )
        self.max_points = _check_max_points(max_points)
        self.method = Method.parse(method)
        self.color = color
        self.line_width = float(line_width)
        self.jit = bool(jit)

        self.params = self._default_params
        self.x_step, self.y_step = self._default_steps
        self._trajectories: list[Trajectory] = []
        self._reset_key = 0

    @property
    def trajectories(self) -> tuple[Trajectory, ...]:
        return tuple(self._trajectories)

    @property
    def reset_key(self) -> int:
        return self._reset_key

    def __len__(self) -> int:
        return len(self._trajectories)

    def grid(self) -> np.ndarray:
        return portrait_grid(self.x_step, self.y_step, self.max_points)

    def compute(self) -> tuple[Trajectory, ...]:
        """Recompute every trajectory from the current settings."""
        self._trajectories = phase_portrait(
            self.params,
            self.method,
            self.x_step,
            self.y_step,
            max_points=self.max_points,
            jit=self.jit,
            color=self.color,
            line_width=self.line_width,
        )
        return self.trajectories

    def update_parameter(self, key: str, value: Any) -> Parameters:
        self.params = self.params.with_field(key, value)
        return self.params

    def set_axis_step(self, key: str, value: Any) -> float:
        """Set 'x_step' or 'y_step'; the previous value stays on error."""
        name = _AXIS_KEYS.get(key)
        if name is None:
            raise InvalidParameterError(key, value, "unknown axis step; expected x_step or y_step")
        step = _check_axis_step(name, value)
        setattr(self, name, step)
        return step

    def set_method(self, method: Method | str) -> Method:
        self.method = Method.parse(method)
        return self.method

    def reset_values(self) -> None:
        """Restore default parameters and grid spacing and drop the trajectories."""
        self.params = self._default_params
        self.x_step, self.y_step = self._default_steps
        self._trajectories = []
        self._reset_key += 1
