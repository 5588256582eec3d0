"""
Pipeline package for the photo strip booth.

This package contains the components responsible for:
- Turning a raw camera frame into a finished black-and-white shot (filters)
- Laying the shots out on a strip and writing it to disk (strip)
- Running the timed capture session end to end (controller)
"""

from .filters import FrameProcessor
from .strip import StripWriter, compose_strip
from .controller import SessionController


__all__ = [
    "FrameProcessor",
    "StripWriter",
    "compose_strip",
    "SessionController",
]
