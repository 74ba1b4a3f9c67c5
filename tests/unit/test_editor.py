import numpy as np
import pytest

from oscilab import InvalidParameterError, ParameterEditor, ParameterHistory, TrajectorySession


@pytest.fixture
def editor():
    return ParameterEditor(TrajectorySession("oscillator"))


def test_history_stack_semantics():
    h = ParameterHistory(maxlen=3)
    assert not h
    assert h.undo() is None
    for v in (1.0, 2.0, 2.0, 3.0, 4.0):
        h.push(v)
    # consecutive duplicate dropped, oldest evicted by maxlen
    assert len(h) == 3
    assert h.peek() == 4.0
    assert [h.undo(), h.undo(), h.undo(), h.undo()] == [4.0, 3.0, 2.0, None]


def test_history_rejects_bad_size():
    with pytest.raises(ValueError):
        ParameterHistory(maxlen=0)


def test_edit_applies_valid_value(editor):
    assert editor.edit("eps", "0.1") == 0.1
    assert editor.session.params.eps == 0.1
    assert editor.can_undo("eps")


def test_edit_accepts_greek_keys(editor):
    editor.edit("α", "2")
    assert editor.session.params.alpha == 2.0
    assert editor.can_undo("alpha")


@pytest.mark.parametrize("raw", ["", "abc", "1e-2", "0.1.2"])
def test_bad_text_leaves_parameters_untouched(editor, raw):
    before = editor.session.params
    with pytest.raises(InvalidParameterError):
        editor.edit("eps", raw)
    assert editor.session.params is before
    assert not editor.can_undo("eps")


def test_zero_dt_rejected_after_parsing(editor):
    before = editor.session.params
    with pytest.raises(InvalidParameterError):
        editor.edit("dt", "0")
    assert editor.session.params is before


def test_minimum_enforced_for_int_time(editor):
    with pytest.raises(InvalidParameterError):
        editor.edit("int_time", "-5")
    assert editor.session.params.int_time == 10.0


def test_undo_restores_previous_values_in_order(editor):
    editor.edit("beta", "0.5")
    editor.edit("beta", "0.7")
    assert editor.undo("beta") == 0.5
    assert editor.session.params.beta == 0.5
    assert editor.undo("beta") == 0.9
    assert editor.session.params.beta == 0.9
    assert editor.undo("beta") is None
    assert editor.session.params.beta == 0.9


def test_edit_initial_state_component(editor):
    editor.edit("z", "0.25")
    np.testing.assert_array_equal(editor.session.initial_state, [1.0, 0.0, 0.25])
    assert editor.undo("z") == 0.0
    np.testing.assert_array_equal(editor.session.initial_state, [1.0, 0.0, 0.0])


def test_step_count_edit(editor):
    editor.edit("step_count", "25")
    assert editor.session.params.step_count == 25
    with pytest.raises(InvalidParameterError):
        editor.edit("steps", "2.5")
    assert editor.session.params.step_count == 25
    # nothing recorded for the unset -> 25 transition
    assert not editor.can_undo("step_count")


def test_reset_clears_histories(editor):
    editor.edit("eps", "0.3")
    editor.edit("x", "2")
    editor.session.reset_values()
    assert not editor.can_undo("eps")
    assert not editor.can_undo("x")
    assert editor.session.params.eps == 0.05


def test_unknown_key(editor):
    with pytest.raises(InvalidParameterError):
        editor.edit("u1", "1.0")
