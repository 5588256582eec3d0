"""
Capture Session FSM Tests
=========================
"""

import pytest
from transitions import MachineError

from photostrip.fsm import CaptureSession


class TestGraph:

    def test_initial_state(self):
        assert CaptureSession().state == "idle"

    def test_happy_path(self):
        session = CaptureSession(frames=1)
        session.start()
        assert session.state == "counting_down"
        session.expire()
        assert session.state == "capturing"
        session.add_shot(object())
        session.shot_done()
        assert session.state == "complete"

    def test_shot_done_loops_until_full(self):
        session = CaptureSession(frames=2)
        session.start()
        session.expire()
        session.add_shot(object())
        session.shot_done()
        assert session.state == "counting_down"

    def test_camera_miss_returns_to_countdown(self):
        session = CaptureSession(frames=2)
        session.start()
        session.expire()
        session.camera_miss()
        assert session.state == "counting_down"
        assert session.shot_count == 0

    @pytest.mark.parametrize("trigger", ["expire", "shot_done", "camera_miss"])
    def test_invalid_from_idle(self, trigger):
        session = CaptureSession()
        with pytest.raises(MachineError):
            getattr(session, trigger)()

    def test_complete_is_terminal_until_reset(self):
        session = CaptureSession(frames=1)
        session.start()
        session.expire()
        session.add_shot(object())
        session.shot_done()

        for trigger in ("start", "expire", "camera_miss"):
            with pytest.raises(MachineError):
                getattr(session, trigger)()

        session.reset()
        assert session.state == "idle"

    @pytest.mark.parametrize("steps", [[], ["start"], ["start", "expire"]])
    def test_reset_from_anywhere(self, steps):
        session = CaptureSession()
        for step in steps:
            getattr(session, step)()
        session.reset()
        assert session.state == "idle"


class TestSessionData:

    def test_shots_are_append_only_view(self):
        session = CaptureSession(frames=2)
        session.add_shot("a")
        shots = session.shots
        assert shots == ("a",)
        session.add_shot("b")
        assert shots == ("a",)
        assert session.shots == ("a", "b")

    def test_cannot_overfill(self):
        session = CaptureSession(frames=1)
        session.add_shot("a")
        assert session.is_full()
        with pytest.raises(RuntimeError):
            session.add_shot("b")

    def test_remaining_never_negative(self):
        session = CaptureSession()
        assert session.remaining(10.0) == 0.0
        session.schedule(now=1.0, interval=3.0)
        assert session.remaining(2.5) == pytest.approx(1.5)
        assert session.remaining(4.0) == 0.0
        assert session.remaining(99.0) == 0.0

    def test_clear(self):
        session = CaptureSession()
        session.add_shot("a")
        session.schedule(0.0, 3.0)
        session.strip = "strip"
        session.clear()
        assert session.shots == ()
        assert session.next_deadline is None
        assert session.strip is None

    def test_frames_must_be_positive(self):
        with pytest.raises(ValueError):
            CaptureSession(frames=0)


class TestCallbacks:

    def test_enter_callback_fires(self):
        entered = []
        session = CaptureSession(callbacks={"on_enter_counting_down": lambda: entered.append("cd")})
        session.start()
        assert entered == ["cd"]

    def test_exit_callback_fires(self):
        left = []
        session = CaptureSession(callbacks={"on_exit_idle": lambda: left.append("idle")})
        session.start()
        assert left == ["idle"]

    def test_rejects_non_callable(self):
        with pytest.raises(ValueError):
            CaptureSession(callbacks={"on_enter_idle": "nope"})

    @pytest.mark.parametrize("name", ["enter_idle", "on_leave_idle", "on_enter_nowhere"])
    def test_rejects_bad_names(self, name):
        with pytest.raises(ValueError):
            CaptureSession(callbacks={name: lambda: None})
