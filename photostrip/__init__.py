"""
Photo strip booth.

Takes a fixed number of timed webcam shots, gives each one a black-and-white
film look and lays them out as a single vertical strip.
"""

from .config import BoothConfig, load_config
from .errors import CameraUnavailable, InvalidDimensions, NotReady, PhotoStripError
from .pipeline import FrameProcessor, SessionController, StripWriter, compose_strip

__version__ = "0.1.0"

__all__ = [
    "BoothConfig",
    "load_config",
    "FrameProcessor",
    "SessionController",
    "StripWriter",
    "compose_strip",
    "PhotoStripError",
    "CameraUnavailable",
    "NotReady",
    "InvalidDimensions",
]
