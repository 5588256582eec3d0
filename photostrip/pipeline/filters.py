"""
Black-and-white film look applied to every captured shot.

Each stage takes a frame and returns a new read-only frame of the same size.
Raw frames are (H, W, 3) RGB uint8, processed frames are (H, W, 4) RGBA uint8
with the luma replicated into R, G and B and full opacity.
"""

import logging
from typing import Optional

import numpy as np

from photostrip.errors import InvalidDimensions


# Fixed film look
CONTRAST = 1.10
GAMMA = 0.95
GRAIN_AMOUNT = 12
VIGNETTE_STRENGTH = 0.35

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def _luma(frame: np.ndarray) -> np.ndarray:
    """Intensity plane of a processed frame as float64."""
    return frame[..., 0].astype(np.float64)


def _to_rgba(v: np.ndarray) -> np.ndarray:
    """Pack an intensity plane (already clamped and floored) into an opaque RGBA frame."""
    h, w = v.shape
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., :3] = v.astype(np.uint8)[..., None]
    out[..., 3] = 255
    return _freeze(out)


def mirror(frame: np.ndarray) -> np.ndarray:
    """Horizontal flip: out[y, x] = in[y, W-1-x]."""
    return _freeze(frame[:, ::-1].copy())


def greyscale(frame: np.ndarray) -> np.ndarray:
    """Rec. 601 luma, floored, opacity forced to 255."""
    r = frame[..., 0].astype(np.float64)
    g = frame[..., 1].astype(np.float64)
    b = frame[..., 2].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    v = np.floor(wr * r + wg * g + wb * b)
    return _to_rgba(np.clip(v, 0, 255))


def contrast_curve(frame: np.ndarray, contrast: float = CONTRAST, gamma: float = GAMMA) -> np.ndarray:
    """
    Contrast around mid-grey followed by a gamma curve.

    contrast > 1 steepens the response around 0.5, gamma < 1 brightens.
    """
    v = _luma(frame) / 255.0
    v = 0.5 + (v - 0.5) * contrast
    v = np.clip(v, 0.0, 1.0)
    v = np.power(v, gamma)
    return _to_rgba(np.floor(v * 255))


def grain(frame: np.ndarray, amount: float = GRAIN_AMOUNT, rng=None) -> np.ndarray:
    """
    Additive uniform noise in [-amount, +amount], one draw per pixel.

    ``rng`` is anything with numpy's ``uniform(low, high, size)`` signature.
    A fresh unseeded generator is used when none is given, so two calls on the
    same input give different results.
    """
    if rng is None:
        rng = np.random.default_rng()

    v = _luma(frame)
    noise = np.asarray(rng.uniform(-amount, amount, size=v.shape), dtype=np.float64)
    return _to_rgba(np.floor(np.clip(v + noise, 0, 255)))


def vignette(frame: np.ndarray, strength: float = VIGNETTE_STRENGTH) -> np.ndarray:
    """Quadratic radial darkening: factor = 1 - strength * r^2, r = 0 at centre, 1 at corners."""
    h, w = frame.shape[:2]
    cx, cy = w * 0.5, h * 0.5
    max_r = np.sqrt(cx * cx + cy * cy)

    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)
    r = np.sqrt((xs - cx) ** 2 + (ys - cy) ** 2) / max_r
    falloff = 1.0 - strength * r * r

    v = _luma(frame)
    return _to_rgba(np.floor(np.clip(v * falloff, 0, 255)))


class FrameProcessor:
    """
    Turns one raw camera frame into one finished strip shot.

    The stages always run in the same order: mirror, greyscale, contrast
    curve, grain, vignette. Grain is random, so process_shot must be called
    exactly once per captured shot.
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng=None,
        contrast: float = CONTRAST,
        gamma: float = GAMMA,
        grain_amount: float = GRAIN_AMOUNT,
        vignette_strength: float = VIGNETTE_STRENGTH,
    ):
        self.log = logging.getLogger("FrameProcessor")
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else np.random.default_rng()
        self.contrast = contrast
        self.gamma = gamma
        self.grain_amount = grain_amount
        self.vignette_strength = vignette_strength

    def check_frame(self, frame: Optional[np.ndarray]):
        """Raise InvalidDimensions unless frame is an (H, W, 3|4) uint8 array at the session size."""
        if frame is None or not isinstance(frame, np.ndarray):
            raise InvalidDimensions(f"Expected a numpy frame, got {type(frame).__name__}")

        if frame.ndim != 3 or frame.shape[2] not in (3, 4):
            raise InvalidDimensions(f"Expected an RGB(A) frame, got shape {frame.shape}")

        h, w = frame.shape[:2]
        if (w, h) != (self.width, self.height):
            raise InvalidDimensions(
                f"Frame is {w}x{h}, session resolution is {self.width}x{self.height}"
            )

        if frame.dtype != np.uint8:
            raise InvalidDimensions(f"Expected uint8 pixels, got {frame.dtype}")

    def process_shot(self, raw: np.ndarray) -> np.ndarray:
        """Full pipeline for one captured frame."""
        self.check_frame(raw)

        out = mirror(raw)
        out = greyscale(out)
        out = contrast_curve(out, self.contrast, self.gamma)
        out = grain(out, self.grain_amount, rng=self.rng)
        out = vignette(out, self.vignette_strength)

        self.log.debug("Processed %dx%d shot", self.width, self.height)
        return out
