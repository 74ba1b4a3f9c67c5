# src/oscilab/__init__.py
from __future__ import annotations

from .errors import (
    OscilabError, InvalidParameterError, InvalidMethodError, InvalidVariantError, ConfigError,
)
from .runtime.types import Variant, Method
from .runtime.params import Parameters, parse_value
from .runtime.trajectory import Trajectory
from .runtime.simulator import run
from .runtime.session import TrajectorySession
from .runtime.editor import ParameterEditor, ParameterHistory
from .runtime.portrait import PhasePortrait, phase_portrait
from .systems import derivative
from .steppers import step, get_stepper
from .config import load_config


__all__ = [
    # Core entry points
    "derivative", "step", "run", "session",
    # Types
    "Variant", "Method", "Parameters", "Trajectory",
    "TrajectorySession", "ParameterEditor", "ParameterHistory",
    "PhasePortrait", "phase_portrait",
    "parse_value", "get_stepper", "load_config",
    # Errors
    "OscilabError", "InvalidParameterError", "InvalidMethodError",
    "InvalidVariantError", "ConfigError",
]


def session(
    variant,
    *,
    method=None,
    params=None,
    initial_state=None,
    config=None,
    jit=False,
) -> TrajectorySession:
    """Create a trajectory session in one call.

    Defaults come from the TOML configuration (see `load_config`); explicit
    arguments override them.

    Parameters:
        variant: "oscillator" / "averaged" or a Variant member.
        method: "euler", "rk4", "adams" or a Method member.
        params: Optional Parameters instance.
        initial_state: Optional initial state sequence.
        config: Optional path to a TOML config file.
        jit: Compile the integration kernels with numba (default False).

    Example::

        import oscilab

        s = oscilab.session("averaged", method="rk4")
        s.update_parameter("int_time", 50)
        s.add_trajectory(color="#d55e00")
        s.add_trajectory()          # continues from where the first ended
    """
    sess = load_config(config).make_session(variant, jit=jit)
    if method is not None:
        sess.set_method(method)
    if params is not None:
        sess.update_parameters(params.as_dict())
    if initial_state is not None:
        sess.set_initial_state(initial_state)
    return sess
