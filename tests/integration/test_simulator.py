from __future__ import annotations

import numpy as np
import pytest

from oscilab import InvalidParameterError, Method, Parameters, Variant, derivative, run
from oscilab.systems.averaged import clamp_domain


@pytest.mark.parametrize("method", list(Method))
@pytest.mark.parametrize("variant, ic", [(Variant.OSCILLATOR, (1.0, 0.0, 0.0)), (Variant.AVERAGED, (1.0, 0.2))])
def test_run_is_deterministic(method, variant, ic):
    params = Parameters(dt=0.01, step_count=500)
    a = run(variant, method, params, ic)
    b = run(variant, method, params, ic)
    assert a.samples.tobytes() == b.samples.tobytes()


@pytest.mark.parametrize("n", [0, 1, 7, 250])
@pytest.mark.parametrize("method", list(Method))
def test_step_count_includes_initial_sample(n, method):
    traj = run(Variant.OSCILLATOR, method, Parameters(dt=0.01), (1.0, 0.0, 0.0), n)
    assert len(traj) == n + 1
    np.testing.assert_array_equal(traj.first, [1.0, 0.0, 0.0])


def test_step_count_defaults_to_parameters():
    traj = run(Variant.AVERAGED, Method.RK4, Parameters(dt=0.1, int_time=2.0), (1.0, 0.0))
    assert len(traj) == 21


@pytest.mark.parametrize("bad", [-1, 1.5, "10"])
def test_invalid_step_count(bad):
    with pytest.raises(InvalidParameterError):
        run(Variant.OSCILLATOR, Method.EULER, Parameters(), (1.0, 0.0, 0.0), bad)


def test_initial_state_shape_checked():
    with pytest.raises(InvalidParameterError):
        run(Variant.AVERAGED, Method.EULER, Parameters(step_count=1), (1.0, 0.0, 0.0))


def test_initial_state_not_mutated():
    ic = np.array([1.0, 0.0, 0.0])
    run(Variant.OSCILLATOR, Method.RK4, Parameters(step_count=20), ic)
    np.testing.assert_array_equal(ic, [1.0, 0.0, 0.0])


@pytest.mark.parametrize("method", list(Method))
@pytest.mark.parametrize(
    "eps, alpha, beta, dt, ic",
    [
        (0.05, 1.0, 0.9, 0.01, (1.0, 0.0)),
        (5.0, 50.0, -3.0, 0.05, (1.0, 0.5)),
        (100.0, 1000.0, 10.0, 0.1, (7.5, -0.9)),
        (0.5, 2.0, 0.2, -0.05, (4.0, 0.3)),
    ],
)
def test_averaged_samples_stay_in_domain(method, eps, alpha, beta, dt, ic):
    traj = run(Variant.AVERAGED, method, Parameters(eps=eps, alpha=alpha, beta=beta, dt=dt, step_count=2000), ic)
    u1, u2 = traj["u1"], traj["u2"]
    # NaN marks divergence and is kept as data; everything else is clamped.
    u1, u2 = u1[~np.isnan(u1)], u2[~np.isnan(u2)]
    assert np.all((u1 >= 0.0) & (u1 <= 8.0))
    assert np.all((u2 >= -1.0) & (u2 <= 1.0))


def test_averaged_clamping_is_applied_after_integration():
    ic = np.array([10.0, 3.0])
    dt = 0.01
    coeffs = (0.05, 1.0, 0.9)
    traj = run(Variant.AVERAGED, Method.EULER, Parameters(*coeffs, dt=dt), ic, 1)

    # Initial sample is clamped too.
    np.testing.assert_array_equal(traj.first, [8.0, 1.0])

    # The step itself starts from the unclamped state.
    unclamped = ic + dt * derivative(Variant.AVERAGED, ic, *coeffs)
    np.testing.assert_allclose(traj.last, np.clip(unclamped, [0.0, -1.0], [8.0, 1.0]))
    from_clamped = np.array([8.0, 1.0]) + dt * derivative(Variant.AVERAGED, (8.0, 1.0), *coeffs)
    assert not np.allclose(traj.last, np.clip(from_clamped, [0.0, -1.0], [8.0, 1.0]))


def test_oscillator_is_never_clamped():
    traj = run(Variant.OSCILLATOR, Method.EULER, Parameters(dt=0.01), (20.0, -5.0, 3.0), 3)
    assert traj.first[0] == 20.0
    assert traj.first[1] == -5.0


def test_clamp_domain_keeps_nan_and_clips_inf():
    block = np.array([[np.inf, -2.0, np.nan, 3.0], [-np.inf, 5.0, 0.5, np.nan]])
    out = clamp_domain(block)
    np.testing.assert_array_equal(out[0, :2], [8.0, 0.0])
    assert np.isnan(out[0, 2]) and out[0, 3] == 3.0
    np.testing.assert_array_equal(out[1, :3], [-1.0, 1.0, 0.5])
    assert np.isnan(out[1, 3])
    # input untouched
    assert block[0, 0] == np.inf


def test_divergence_propagates_without_error():
    params = Parameters(eps=50.0, alpha=50.0, dt=0.5, step_count=400)
    traj = run(Variant.OSCILLATOR, Method.RK4, params, (3.0, 3.0, 3.0))
    assert len(traj) == 401
    assert traj.diverged
    assert np.all(np.isfinite(traj.samples[:, 0]))
    assert not traj.finite_mask()[-1]


@pytest.mark.parametrize("method", list(Method))
@pytest.mark.parametrize("variant, ic", [(Variant.OSCILLATOR, (1.0, 0.2, 0.1)), (Variant.AVERAGED, (1.0, 0.3))])
def test_jit_toggle_matches_python(method, variant, ic):
    pytest.importorskip("numba")
    params = Parameters(dt=0.01, step_count=200)
    py = run(variant, method, params, ic, jit=False)
    jt = run(variant, method, params, ic, jit=True)
    np.testing.assert_allclose(jt.samples, py.samples, rtol=1e-12, atol=1e-14)
