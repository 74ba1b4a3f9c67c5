# src/oscilab/runtime/simulator.py
from __future__ import annotations

from dataclasses import dataclass
import functools
from typing import Callable, Optional

import numpy as np

from oscilab.compiler.jit import jit_compile
from oscilab.errors import InvalidParameterError
from oscilab.steppers import get_stepper
from oscilab.systems import get_system, pack_params
from .params import Parameters, validate_field
from .trajectory import Trajectory
from .types import Method, Variant

__all__ = ["run", "as_state", "Kernels", "compiled_kernels", "integrate"]


def as_state(values, n_state: int, name: str = "initial_state") -> np.ndarray:
    """Copy `values` into a fresh float64 state vector of length n_state."""
    try:
        y = np.array(values, dtype=np.float64, copy=True)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(name, values, f"not a numeric vector: {exc}") from exc
    if y.shape != (n_state,):
        raise InvalidParameterError(name, values, f"expected shape ({n_state},), got {y.shape}")
    return y


def integrate(stepper, rhs, params, dt, y_curr, y_prop, samples, n_steps):
    """
    Fill samples[:, 1:n_steps + 1] by repeated stepping from y_curr.

    Written in the numba-compatible subset so the same loop runs interpreted
    or compiled. The first step is taken with cold memory (None); afterwards
    whatever the stepper returns is threaded into the next call. y_curr and
    y_prop are used as swap buffers and are clobbered.
    """
    if n_steps == 0:
        return
    memory = stepper(dt, y_curr, rhs, params, None, y_prop)
    samples[:, 1] = y_prop
    y_curr, y_prop = y_prop, y_curr
    for k in range(2, n_steps + 1):
        memory = stepper(dt, y_curr, rhs, params, memory, y_prop)
        samples[:, k] = y_prop
        y_curr, y_prop = y_prop, y_curr


@dataclass(frozen=True)
class Kernels:
    """Vector field, stepper and loop for one (variant, method) pair."""
    rhs: Callable
    stepper: Callable
    loop: Callable
    jitted: bool


@functools.lru_cache(maxsize=None)
def compiled_kernels(variant: Variant, method: Method, jit: bool = False) -> Kernels:
    """
    Build (and with jit=True, compile) the callables `run` uses.

    Results are cached per process, so numba compiles each combination once
    and later runs reuse the compiled dispatchers.
    """
    system = get_system(variant)
    stepper_spec = get_stepper(method)
    rhs = jit_compile(system.rhs, jit=jit, component=f"{variant.value}_rhs")
    # Without numba the rhs falls back to Python; the stepper and loop follow.
    stepper = jit_compile(
        stepper_spec.emit(rhs.fn), jit=rhs.jitted, component=f"{method.value}_stepper"
    )
    loop = jit_compile(integrate, jit=rhs.jitted, component="integrate")
    return Kernels(rhs=rhs.fn, stepper=stepper.fn, loop=loop.fn, jitted=rhs.jitted)


def run(
    variant: Variant,
    method: Method,
    params: Parameters,
    initial_state,
    step_count: Optional[int] = None,
    *,
    jit: bool = False,
    color: Optional[str] = None,
    line_width: Optional[float] = None,
) -> Trajectory:
    """
    Integrate `variant` from `initial_state` with `method`.

    Sample convention: the returned trajectory always starts with the initial
    state, so `step_count = N` yields N + 1 samples and `step_count = 0`
    yields the initial sample alone.

    Args:
        variant: which system to integrate (a Variant member)
        method: which stepper to use (a Method member)
        params: coefficients and the signed step dt
        initial_state: sequence of n_state reals
        step_count: number of steps; None uses params.n_steps
        jit: compile the vector field, stepper and loop with numba when
            available (compiled once per process and variant/method pair)
        color, line_width: opaque display metadata stored on the trajectory

    Returns:
        A new, read-only Trajectory. Non-finite values are kept as data.

    Raises:
        InvalidVariantError / InvalidMethodError: for anything that is not a
            registered enum member (never replaced by a default)
        InvalidParameterError: for a negative or non-integer step_count or a
            malformed initial state
    """
    system = get_system(variant)
    get_stepper(method)

    n_steps = params.n_steps if step_count is None else validate_field("step_count", step_count)
    y_curr = as_state(initial_state, system.n_state)

    kernels = compiled_kernels(variant, method, bool(jit))
    pvec = pack_params(*params.coefficients)
    dt = float(params.dt)

    samples = np.empty((system.n_state, n_steps + 1), dtype=np.float64)
    samples[:, 0] = y_curr
    y_prop = np.empty_like(y_curr)

    # Overflow to inf/nan is recorded, not reported.
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        kernels.loop(kernels.stepper, kernels.rhs, pvec, dt, y_curr, y_prop, samples, n_steps)

        if system.postprocess is not None:
            samples = system.postprocess(samples)

    return Trajectory(
        samples=samples,
        state_names=system.state_names,
        variant=variant,
        method=method,
        params=params,
        color=color,
        line_width=line_width,
    )
