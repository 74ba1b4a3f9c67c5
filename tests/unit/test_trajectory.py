import numpy as np
import pytest

from oscilab import Method, Parameters, Trajectory, Variant, run


def _traj(samples, names=("u1", "u2")):
    return Trajectory(
        samples=np.asarray(samples, dtype=float),
        state_names=names,
        variant=Variant.AVERAGED,
        method=Method.EULER,
        params=Parameters(),
        color="#123456",
        line_width=3.0,
    )


def test_samples_are_read_only_copies():
    source = np.array([[1.0, 2.0, 3.0], [0.0, 0.1, 0.2]])
    traj = _traj(source)
    source[0, 0] = 99.0
    assert traj.samples[0, 0] == 1.0
    with pytest.raises(ValueError):
        traj.samples[0, 0] = 5.0


def test_component_access():
    traj = _traj([[1.0, 2.0], [0.0, 0.5]])
    np.testing.assert_array_equal(traj["u1"], [1.0, 2.0])
    np.testing.assert_array_equal(traj.u2, [0.0, 0.5])
    np.testing.assert_array_equal(traj.component("u2"), [0.0, 0.5])
    assert set(traj.columns()) == {"u1", "u2"}
    with pytest.raises(KeyError):
        traj["x"]
    with pytest.raises(AttributeError):
        traj.x


def test_first_last_are_writable_copies():
    traj = _traj([[1.0, 2.0], [0.0, 0.5]])
    last = traj.last
    last[0] = -1.0
    assert traj.samples[0, -1] == 2.0
    np.testing.assert_array_equal(traj.first, [1.0, 0.0])


def test_shape_must_match_state_names():
    with pytest.raises(ValueError):
        _traj([[1.0, 2.0], [0.0, 0.5], [0.0, 0.0]])


def test_divergence_helpers():
    traj = _traj([[1.0, np.inf, np.nan], [0.0, 0.5, 0.5]])
    assert traj.diverged
    assert traj.divergence_index == 1
    np.testing.assert_array_equal(traj.finite_mask(), [True, False, False])

    clean = _traj([[1.0, 2.0], [0.0, 0.5]])
    assert not clean.diverged
    assert clean.divergence_index == -1


def test_with_display_keeps_samples():
    traj = _traj([[1.0, 2.0], [0.0, 0.5]])
    other = traj.with_display(color="red")
    assert other.color == "red"
    assert other.line_width == 3.0
    assert other.samples is traj.samples


def test_to_dict_carries_display_metadata():
    traj = run(Variant.OSCILLATOR, Method.EULER, Parameters(step_count=2), (1.0, 0.0, 0.0), color="blue", line_width=1.5)
    data = traj.to_dict()
    assert set(data) == {"x", "y", "z", "color", "line_width"}
    assert len(data["x"]) == 3
    assert data["color"] == "blue"
    assert data["line_width"] == 1.5
