from .still import StillImageCamera, load_rgb
from .webcam import WebcamCamera

__all__ = ["WebcamCamera", "StillImageCamera", "load_rgb"]
