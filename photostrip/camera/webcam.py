"""Webcam frame source backed by OpenCV's VideoCapture.

Frames come out as RGB uint8 arrays at the booth resolution. Many USB webcams
ignore the requested capture size, so frames are resized when they disagree.

The camera never raises from current_frame(): a failed read returns None and
the session controller simply tries again on its next tick.
"""

from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger


class WebcamCamera:
    def __init__(self, index: int = 0, resolution: Tuple[int, int] = (360, 270)):
        self.index = index
        self.resolution = resolution
        self.cap: Optional[cv2.VideoCapture] = None

    # -------------------- Public API --------------------

    def initialize(self):
        """Open the device and request the booth resolution."""
        if self.cap is not None:
            logger.debug("Webcam {} already open", self.index)
            return

        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Could not open webcam device {self.index}")

        width, height = self.resolution
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        actual = (
            int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        if actual != self.resolution:
            logger.warning(
                "Webcam {} delivers {}x{}, frames will be resized to {}x{}",
                self.index, actual[0], actual[1], width, height,
            )

        self.cap = cap
        logger.info("Webcam {} opened at {}x{}", self.index, width, height)

    def shutdown(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Webcam stopped")

    def current_frame(self) -> Optional[np.ndarray]:
        """Latest RGB frame at the booth resolution, or None if the device has nothing."""
        if self.cap is None:
            logger.debug("current_frame called before initialize()")
            return None

        try:
            ok, frame = self.cap.read()
        except cv2.error as e:
            logger.warning("Webcam read failed: {}", e)
            return None

        if not ok or frame is None:
            logger.debug("Webcam returned no frame")
            return None

        return self._normalize(frame)

    # -------------------- Utilities --------------------

    def _normalize(self, frame: np.ndarray) -> np.ndarray:
        """BGR(A)/grey device frame -> RGB at the booth resolution."""
        if frame.ndim == 2:
            rgb = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
        elif frame.shape[2] == 4:
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
        else:
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        width, height = self.resolution
        if rgb.shape[1] != width or rgb.shape[0] != height:
            rgb = cv2.resize(rgb, (width, height), interpolation=cv2.INTER_AREA)

        return np.ascontiguousarray(rgb, dtype=np.uint8)

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
