from pathlib import Path
import logging
import math
import threading
import time
from typing import Callable, Optional

import numpy as np

from photostrip.config import BoothConfig
from photostrip.errors import CameraUnavailable, InvalidDimensions, NotReady
from photostrip.fsm import CaptureSession
from photostrip.pipeline.filters import FrameProcessor
from photostrip.pipeline.strip import StripWriter, compose_strip


class SessionController:
    """
    Orchestrates one photo strip session:
    - Drives the capture FSM from tick(now)
    - Grabs a frame from the camera when a countdown expires
    - Runs it through the film pipeline
    - Composes the strip once every shot is in
    - Saves the strip on request

    The camera is anything with ``current_frame() -> ndarray | None``, the
    writer anything with ``save(image, path) -> bool`` and the clock a
    zero-argument callable returning monotonic seconds.
    """

    def __init__(
        self,
        camera,
        config: Optional[BoothConfig] = None,
        processor: Optional[FrameProcessor] = None,
        writer=None,
        clock: Callable[[], float] = time.monotonic,
        callbacks: dict = None,
    ):
        self.log = logging.getLogger("SessionController")

        self.config = config or BoothConfig()
        self.camera = camera
        self.processor = processor or FrameProcessor(self.config.width, self.config.height)
        self.writer = writer or StripWriter()
        self.clock = clock

        self._lock = threading.RLock()
        self._tick_time = 0.0

        # --- FSM ---
        self.session = CaptureSession(
            frames=self.config.frames,
            callbacks=self._fsm_callbacks(callbacks),
        )

    # ----------------------------------------------------------------------
    # FSM CALLBACKS
    # ----------------------------------------------------------------------

    def _fsm_callbacks(self, user_callbacks):
        """Merge internal callbacks with user-provided ones."""
        cb = user_callbacks.copy() if user_callbacks else {}

        cb.update(
            {
                "on_enter_idle": self._on_enter_idle,
                "on_enter_counting_down": self._on_enter_counting_down,
                "on_enter_capturing": self._on_enter_capturing,
                "on_enter_complete": self._on_enter_complete,
            }
        )
        return cb

    def _on_enter_idle(self):
        self.session.clear()
        self.log.info("Session reset")

    def _on_enter_counting_down(self):
        remaining = self.session.remaining(self._tick_time)
        self.log.debug(
            f"Counting down to shot {self.session.shot_count + 1}/{self.config.frames} "
            f"({remaining:.2f}s left)"
        )

    def _on_enter_capturing(self):
        index = self.session.shot_count
        self.log.info(f"Capturing shot {index + 1}/{self.config.frames}...")

        try:
            frame = self.camera.current_frame()
        except CameraUnavailable as e:
            self.log.warning(f"Camera unavailable: {e}")
            frame = None
        except Exception as e:
            self.log.error(f"Camera capture failed: {e}")
            frame = None

        if frame is None:
            # Deadline stays in the past, so the next tick retries straight away
            self.log.warning("Camera returned no frame, retrying on next tick")
            self.session.camera_miss()
            return

        try:
            shot = self.processor.process_shot(frame)
        except InvalidDimensions:
            self.log.error("Camera frame does not match the session resolution")
            self.session.camera_miss()
            raise
        except Exception as e:
            self.log.error(f"Processing shot {index + 1} failed: {e}")
            self.session.camera_miss()
            raise

        self.session.add_shot(shot)

        if not self.session.is_full():
            self.session.schedule(self._tick_time, self.config.interval)

        self.session.shot_done()

    def _on_enter_complete(self):
        self.session.next_deadline = None
        self.session.strip = self.compose()
        self.log.info(f"All {self.config.frames} shots taken, strip composed")

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def start(self, now: Optional[float] = None):
        """
        Start a new session.

        Called from any state other than idle, the current session is reset
        first and a fresh one is started.
        """
        with self._lock:
            now = self._now(now)
            if self.session.state != "idle":
                self.log.info(f"Start requested while {self.session.state}, resetting first")
                self.session.reset()

            self._tick_time = now
            self.session.schedule(now, self.config.interval)
            self.session.start()

    def reset(self):
        """Abandon the current session, whatever its state."""
        with self._lock:
            self.session.reset()

    def tick(self, now: Optional[float] = None) -> str:
        """
        Advance the session to ``now``. Takes at most one shot per call.

        Returns the state after the tick.
        """
        with self._lock:
            now = self._now(now)
            self._tick_time = now

            if self.session.state == "counting_down" and self.session.remaining(now) <= 0:
                self.session.expire()

            return self.session.state

    def compose(self, slots: Optional[int] = None) -> np.ndarray:
        """Compose the strip from the shots taken so far."""
        with self._lock:
            return compose_strip(
                self.session.shots,
                self.config.width,
                self.config.height,
                pad=self.config.pad,
                gap=self.config.gap,
                slots=slots,
            )

    def preview_strip(self) -> np.ndarray:
        """Strip for display: the finished strip, or the shots so far with empty slots."""
        with self._lock:
            if self.session.strip is not None:
                return self.session.strip
            return self.compose(slots=self.config.frames)

    def save(self, name: Optional[str] = None) -> Optional[Path]:
        """
        Recompose the strip from the stored shots and write it out.

        Raises NotReady unless the session is complete. Does not change
        session state, so saving twice writes the same image twice.
        """
        with self._lock:
            if self.session.state != "complete":
                raise NotReady(
                    f"Cannot save in state '{self.session.state}' "
                    f"({self.session.shot_count}/{self.config.frames} shots)"
                )

            strip = self.compose()
            path = self.config.output_dir / (name or self.config.filename)

            if not self.writer.save(strip, path):
                self.log.error(f"Saving strip to {path} failed")
                return None

            return path

    # ----------------------------------------------------------------------
    # STATUS
    # ----------------------------------------------------------------------

    @property
    def state(self) -> str:
        with self._lock:
            return self.session.state

    @property
    def shot_count(self) -> int:
        with self._lock:
            return self.session.shot_count

    @property
    def shots(self):
        with self._lock:
            return self.session.shots

    @property
    def strip(self) -> Optional[np.ndarray]:
        with self._lock:
            return self.session.strip

    def remaining(self, now: Optional[float] = None) -> float:
        """Seconds until the next shot, never negative."""
        with self._lock:
            return self.session.remaining(self._now(now))

    def countdown_seconds(self, now: Optional[float] = None) -> int:
        """Whole seconds to show on the countdown; 0 means the shot is due."""
        left = math.ceil(self.remaining(now))
        return max(0, min(left, math.ceil(self.config.interval)))

    def status_text(self) -> str:
        with self._lock:
            state = self.session.state
            count = self.session.shot_count

        if state == "idle":
            return "Ready to shoot"
        if state == "complete":
            return "Done!"
        return f"Capturing… ({count}/{self.config.frames})"
