import logging
import time
from typing import Optional

import cv2

from photostrip.config import BoothConfig
from photostrip.display import render
from photostrip.errors import NotReady
from photostrip.pipeline.controller import SessionController


class BoothApp:
    """
    Window loop around a SessionController.

    Keys: S = start, R = reset, P = save, Q / Esc = quit. The controller is
    ticked once per rendered frame.
    """

    def __init__(self, controller: SessionController, camera, window_size=(1280, 720)):
        self.log = logging.getLogger("BoothApp")
        self.controller = controller
        self.camera = camera
        self.window_size = window_size
        self.running = False

    @property
    def config(self) -> BoothConfig:
        return self.controller.config

    def handle_key(self, key: int) -> bool:
        """React to one key code; returns False when the app should quit."""
        if key < 0:
            return True

        char = chr(key & 0xFF).lower()

        if char == "s":
            self.controller.start()
        elif char == "r":
            self.controller.reset()
        elif char == "p":
            try:
                path = self.controller.save()
            except NotReady as e:
                self.log.warning(f"Nothing to save yet: {e}")
            else:
                if path is not None:
                    self.log.info(f"Strip saved to {path}")
        elif char == "q" or key & 0xFF == 27:
            return False

        return True

    def step(self, now: Optional[float] = None):
        """One frame: tick the session and draw the screen."""
        now = time.monotonic() if now is None else now
        self.controller.tick(now)
        frame = self.camera.current_frame()
        return render(self.controller, frame, self.window_size, now)

    def run(self):
        self.running = True
        cv2.namedWindow(self.config.window_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.config.window_name, *self.window_size)
        self.log.info("Booth running, press S to start")

        try:
            while self.running:
                screen = self.step()
                cv2.imshow(self.config.window_name, screen)
                if not self.handle_key(cv2.waitKey(15)):
                    self.running = False
        finally:
            cv2.destroyAllWindows()
            self.log.info("Booth closed")
