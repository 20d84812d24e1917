"""Tests for the interactive session state machine."""

import logging

import numpy as np
import pytest
from optheat import grid
from optheat.core import Params
from optheat.session import (
    COMPUTE_ROW, QUIT_ROW, Editing, Event, EventKind, Navigating, Session,
)


def feed(session, *keys):
    """Send key identifiers; returns the quit flag of the last one."""
    done = False
    for key in keys:
        event = Event.from_key(key)
        if event is not None:
            done = session.handle(event)
    return done


@pytest.fixture
def recompute_calls(monkeypatch):
    calls = []
    real = grid.compute_surfaces

    def counting(params, *args, **kwargs):
        calls.append(params.v)
        return real(params, *args, **kwargs)

    monkeypatch.setattr(grid, "compute_surfaces", counting)
    return calls


class TestEventFromKey:
    def test_named_keys(self):
        assert Event.from_key("up").kind is EventKind.MOVE_UP
        assert Event.from_key("down").kind is EventKind.MOVE_DOWN
        assert Event.from_key("enter").kind is EventKind.CONFIRM
        assert Event.from_key("backspace").kind is EventKind.BACKSPACE
        assert Event.from_key("resize").kind is EventKind.RESIZE
        assert Event.from_key("ctrl+c").kind is EventKind.INTERRUPT

    def test_volatility_keys(self):
        assert Event.from_key("left").kind is EventKind.VOL_DOWN
        assert Event.from_key("a").kind is EventKind.VOL_DOWN
        assert Event.from_key("right").kind is EventKind.VOL_UP
        assert Event.from_key("d").kind is EventKind.VOL_UP
        assert Event.from_key("q").kind is EventKind.QUIT

    def test_characters(self):
        assert Event.from_key("7") == Event(EventKind.CHAR, "7")
        assert Event.from_key("x") == Event(EventKind.CHAR, "x")

    def test_unknown(self):
        assert Event.from_key("esc") is None
        assert Event.from_key("tab") is None


class TestModes:
    def test_editing_rejects_action_rows(self):
        with pytest.raises(ValueError):
            Editing(COMPUTE_ROW)
        with pytest.raises(ValueError):
            Editing(QUIT_ROW)

    def test_navigating_range(self):
        Navigating(QUIT_ROW)
        with pytest.raises(ValueError):
            Navigating(QUIT_ROW + 1)


class TestNavigation:
    def test_initial_state(self):
        s = Session()
        assert s.params == Params(100, 100, 1, 0.05, 0.02, 0.2)
        assert s.mode == Navigating(0)
        assert s.surfaces is None

    def test_defaults_not_shared(self):
        a, b = Session(), Session()
        a.params.S = 1.0
        assert b.params.S == 100.0

    def test_focus_clamps(self):
        s = Session()
        feed(s, "up")
        assert s.focus == 0
        feed(s, *["down"] * 12)
        assert s.focus == QUIT_ROW
        feed(s, "up")
        assert s.focus == COMPUTE_ROW

    def test_quit_key(self):
        assert feed(Session(), "q") is True

    def test_confirm_on_quit_row(self):
        s = Session()
        assert feed(s, *["down"] * 7) is False
        assert feed(s, "enter") is True

    def test_unrecognised_keys_are_noops(self):
        s = Session()
        assert feed(s, "x", "5", "backspace", "resize") is False
        assert s.mode == Navigating(0)
        assert s.params == Params()

    def test_interrupt_quits_while_editing(self):
        s = Session()
        feed(s, "enter")
        assert s.editing
        assert feed(s, "ctrl+c") is True


class TestEditing:
    def test_buffer_prefilled(self):
        s = Session()
        feed(s, "down", "enter")
        assert s.mode == Editing(1, "100")

    @pytest.mark.parametrize("value", [0.1 + 0.2, 0.2 - 0.05, 1 / 3, 1e-7, 123456789.123, 1e22])
    def test_unchanged_edit_keeps_exact_value(self, value):
        s = Session(Params(S=value))
        feed(s, "enter", "enter")
        assert s.params.S == value
        assert s.mode == Navigating(0)

    def test_edit_strike(self):
        s = Session()
        feed(s, "down", "enter", "backspace", "backspace", "backspace",
             "1", "2", "3", "enter")
        assert s.params.K == 123.0
        assert s.mode == Navigating(1)
        assert not s.editing

    def test_two_down_edits_maturity(self):
        s = Session()
        feed(s, "down", "down", "enter", "1", "2", "3", "enter")
        assert s.params.T == 1123.0
        assert s.params.K == 100.0
        assert s.mode == Navigating(2)

    def test_only_numeric_characters(self):
        s = Session()
        feed(s, "enter", "x", "a", "q", "d", "-", ".", "up")
        assert s.mode == Editing(0, "100-.")

    def test_backspace_on_empty(self):
        s = Session()
        feed(s, "enter", "backspace", "backspace", "backspace", "backspace")
        assert s.mode == Editing(0, "")

    @pytest.mark.parametrize("typed", [["-"], ["-", "-"], ["1", ".", "2", ".", "3"], []])
    def test_unparsable_edit_keeps_value(self, typed):
        s = Session()
        feed(s, "down", "down", "down", "enter", "backspace", "backspace",
             "backspace", "backspace", *typed)
        assert s.commit_edit() is False
        assert s.params.r == 0.05
        assert s.mode == Navigating(3)
        assert s.message.startswith("invalid number")

    def test_failed_edit_is_logged(self, caplog):
        s = Session()
        feed(s, "enter", "backspace", "backspace", "backspace", "-")
        with caplog.at_level(logging.INFO, logger="optheat"):
            feed(s, "enter")
        assert "discarded edit of S" in caplog.text

    def test_message_cleared_by_next_event(self):
        s = Session()
        feed(s, "enter", "backspace", "backspace", "backspace", "enter")
        assert s.message is not None
        feed(s, "down")
        assert s.message is None

    def test_commit_edit_success(self):
        s = Session()
        feed(s, "down", "down", "down", "down", "down", "enter", "5")
        assert s.commit_edit() is True
        assert s.params.v == 0.25

    def test_commit_outside_edit(self):
        with pytest.raises(RuntimeError):
            Session().commit_edit()

    def test_editing_does_not_recompute(self, recompute_calls):
        s = Session()
        feed(s, "enter", "9", "enter", "enter", "backspace", "enter")
        assert recompute_calls == []
        assert s.surfaces is None


class TestSurfaces:
    def test_compute_row(self, recompute_calls):
        s = Session()
        feed(s, *["down"] * 6, "enter")
        assert len(recompute_calls) == 1
        assert s.surfaces.call.shape == (20, 20)
        assert s.surfaces.put.shape == (20, 20)

    def test_compute_is_idempotent(self):
        s = Session()
        feed(s, *["down"] * 6, "enter")
        first = s.surfaces
        feed(s, "enter")
        assert s.surfaces is not first
        assert first.call.tobytes() == s.surfaces.call.tobytes()
        assert first.put.tobytes() == s.surfaces.put.tobytes()

    def test_five_vol_decrements(self, recompute_calls):
        s = Session()
        seen = []
        for _ in range(5):
            feed(s, "left")
            seen.append(s.surfaces)
        assert s.params.v == pytest.approx(0.15)
        assert len(recompute_calls) == 5
        assert len({id(x) for x in seen}) == 5

    def test_vol_floor_on_decrement(self, recompute_calls):
        s = Session(Params(v=0.01))
        feed(s, "a")
        assert s.params.v == 0.01
        assert len(recompute_calls) == 1

    def test_vol_increment(self, recompute_calls):
        s = Session()
        feed(s, "right", "d")
        assert s.params.v == pytest.approx(0.22)
        assert len(recompute_calls) == 2
        np.testing.assert_allclose(s.surfaces.vols[-1], 1.4 * 0.22)

    def test_vol_keys_ignored_while_editing(self, recompute_calls):
        s = Session()
        feed(s, "enter", "left", "right")
        assert s.params.v == 0.2
        assert recompute_calls == []

    def test_surfaces_replaced_together(self):
        s = Session()
        feed(s, *["down"] * 6, "enter")
        before = s.surfaces
        feed(s, "d")
        assert s.surfaces.call is not before.call
        assert s.surfaces.put is not before.put
        np.testing.assert_allclose(s.surfaces.vols[0], 0.8 * 0.21)
