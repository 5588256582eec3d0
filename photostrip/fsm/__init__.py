from .session_fsm import CaptureSession

__all__ = ["CaptureSession"]
