"""Exceptions raised by the photo strip core."""


class PhotoStripError(Exception):
    """Base class for all photostrip errors."""


class CameraUnavailable(PhotoStripError):
    """The frame source had nothing to give (device busy, unplugged, warming up)."""


class NotReady(PhotoStripError):
    """An operation needs a completed session (e.g. saving the strip)."""


class InvalidDimensions(PhotoStripError, ValueError):
    """A frame does not match the session's fixed resolution or channel layout."""
