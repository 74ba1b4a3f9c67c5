# tests/steppers/ode/test_euler_basic.py
"""
Euler stepper tests using the public API.

Tests verify:
- Single-step values for the oscillator at the default coefficients
- Analytic solution matching for the harmonic case (eps = 0)
- Forward/backward round trip with a signed step
"""
from __future__ import annotations

import numpy as np
import pytest

from oscilab import Method, Parameters, Variant, derivative, run, step


def test_euler_single_step_default_coefficients():
    params = Parameters(eps=0.05, alpha=1.0, beta=0.9, dt=0.001)
    traj = run(Variant.OSCILLATOR, Method.EULER, params, (1.0, 0.0, 0.0), 1)

    assert len(traj) == 2
    np.testing.assert_allclose(traj.samples[:, 0], [1.0, 0.0, 0.0])
    np.testing.assert_allclose(traj.samples[:, 1], [1.0, -0.001, 0.00005], rtol=1e-12, atol=1e-15)


def test_euler_step_matches_formula():
    s = np.array([0.3, -0.7, 0.2])
    dt = 0.01
    y1, memory = step(Method.EULER, s, None, dt, 0.1, 1.0, 0.5, variant=Variant.OSCILLATOR)
    expected = s + dt * derivative(Variant.OSCILLATOR, s, 0.1, 1.0, 0.5)
    np.testing.assert_array_equal(y1, expected)
    assert memory is None


def test_euler_harmonic_analytic():
    """
    eps = 0 and z = 0 reduce the oscillator to x'' = -x.
    Analytic: x(t) = cos t, y(t) = -sin t.
    """
    T = 2.0
    dt = 0.001
    params = Parameters(eps=0.0, dt=dt, int_time=T)
    traj = run(Variant.OSCILLATOR, Method.EULER, params, (1.0, 0.0, 0.0))

    assert len(traj) == 2001
    x_end, y_end, z_end = traj.last
    assert x_end == pytest.approx(np.cos(T), abs=5e-3)
    assert y_end == pytest.approx(-np.sin(T), abs=5e-3)
    assert z_end == 0.0


def test_euler_forward_backward_round_trip():
    s = np.array([1.0, 0.5, 0.2])
    dt = 1e-3
    fwd, _ = step(Method.EULER, s, None, dt, 0.05, 1.0, 0.9, variant=Variant.OSCILLATOR)
    back, _ = step(Method.EULER, fwd, None, -dt, 0.05, 1.0, 0.9, variant=Variant.OSCILLATOR)

    # Local truncation error is O(dt^2), not exact.
    assert np.linalg.norm(back - s) < 10 * dt**2
    assert np.linalg.norm(fwd - s) > 10 * dt**2


def test_euler_negative_dt_runs_backwards():
    params = Parameters(eps=0.0, dt=-0.001, step_count=1000)
    traj = run(Variant.OSCILLATOR, Method.EULER, params, (1.0, 0.0, 0.0))
    # x(-1) = cos(1), y(-1) = sin(1)
    assert traj.last[0] == pytest.approx(np.cos(1.0), abs=5e-3)
    assert traj.last[1] == pytest.approx(np.sin(1.0), abs=5e-3)
