"""Frame source that replays image files, one per shot.

Used for offline runs (``photostrip strip``) and anywhere a webcam is not
around. Files are loaded lazily and normalized the same way webcam frames are.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from photostrip.errors import CameraUnavailable


def load_rgb(path: Path) -> np.ndarray:
    """Read an image file as an RGB uint8 array."""
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError(f"Failed to read image: {path}")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


class StillImageCamera:
    def __init__(self, paths: Sequence[Path], resolution: Tuple[int, int] = (360, 270), loop: bool = False):
        if not paths:
            raise ValueError("StillImageCamera needs at least one image")
        self.paths: List[Path] = [Path(p) for p in paths]
        self.resolution = resolution
        self.loop = loop
        self._next = 0

    def current_frame(self) -> Optional[np.ndarray]:
        """Next image in the list, resized to the booth resolution."""
        if self._next >= len(self.paths):
            if not self.loop:
                raise CameraUnavailable("No more images to replay")
            self._next = 0

        path = self.paths[self._next]
        self._next += 1

        try:
            rgb = load_rgb(path)
        except ValueError as e:
            logger.warning("{}", e)
            return None

        width, height = self.resolution
        if rgb.shape[1] != width or rgb.shape[0] != height:
            logger.debug("Resizing {} from {}x{}", path.name, rgb.shape[1], rgb.shape[0])
            rgb = cv2.resize(rgb, (width, height), interpolation=cv2.INTER_AREA)

        return rgb
