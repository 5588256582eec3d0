"""
Booth screen rendering.

Left: mirrored live preview, status line and the countdown overlay.
Right: the strip (partial while capturing) on paper, scaled to fit.
Everything is drawn into a BGR canvas ready for cv2.imshow.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from photostrip.pipeline.controller import SessionController


BACKGROUND = 18
PANEL = 30
PAPER = 245
TEXT = (220, 220, 220)
FONT = cv2.FONT_HERSHEY_SIMPLEX

MARGIN = 16
PANEL_MAX_W = 440


def _clip_box(canvas: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> Tuple[int, int, int, int]:
    h, w = canvas.shape[:2]
    return max(0, x0), max(0, y0), min(w, x1), min(h, y1)


def _shade(canvas: np.ndarray, x0: int, y0: int, x1: int, y1: int, alpha: float):
    """Darken a box in place, alpha = 0 (untouched) .. 1 (black)."""
    x0, y0, x1, y1 = _clip_box(canvas, x0, y0, x1, y1)
    if x1 <= x0 or y1 <= y0:
        return
    region = canvas[y0:y1, x0:x1].astype(np.float32)
    canvas[y0:y1, x0:x1] = (region * (1.0 - alpha)).astype(np.uint8)


def _paste(canvas: np.ndarray, image: np.ndarray, x: int, y: int):
    """Copy image onto canvas at (x, y), cropping whatever falls outside."""
    x0, y0, x1, y1 = _clip_box(canvas, x, y, x + image.shape[1], y + image.shape[0])
    if x1 <= x0 or y1 <= y0:
        return
    canvas[y0:y1, x0:x1] = image[y0 - y:y1 - y, x0 - x:x1 - x]


def preview_rect(size: Tuple[int, int], resolution: Tuple[int, int]) -> Tuple[int, int, int, int]:
    """(x, y, w, h) of the live preview for a window of ``size``."""
    win_w, win_h = size
    cam_w, cam_h = resolution
    panel_w = min(PANEL_MAX_W, win_w * 0.45)
    panel_h = win_h - 80
    m = 20
    scale = min((panel_w - 2 * m) / cam_w, (panel_h * 0.75 - 2 * m) / cam_h)
    scale = max(scale, 0.0)
    return MARGIN + m, MARGIN + m, int(cam_w * scale), int(cam_h * scale)


def draw_preview_panel(canvas: np.ndarray, controller: SessionController, frame: Optional[np.ndarray]):
    win_h, win_w = canvas.shape[:2]
    panel_w = int(min(PANEL_MAX_W, win_w * 0.45))
    panel_h = win_h - 80
    cv2.rectangle(canvas, (MARGIN, MARGIN), (MARGIN + panel_w, MARGIN + panel_h), (PANEL,) * 3, -1)

    px, py, w, h = preview_rect((win_w, win_h), controller.config.resolution)
    if w <= 0 or h <= 0:
        return

    if frame is not None:
        mirrored = cv2.flip(frame, 1)
        live = cv2.resize(mirrored, (w, h), interpolation=cv2.INTER_AREA)
        _paste(canvas, cv2.cvtColor(live, cv2.COLOR_RGB2BGR), px, py)
    else:
        cv2.putText(canvas, "No camera", (px + 12, py + h // 2), FONT, 0.6, TEXT, 1, cv2.LINE_AA)

    cv2.rectangle(canvas, (px, py), (px + w, py + h), (90, 90, 90), 1)
    cv2.putText(canvas, controller.status_text(), (px, py + h + 28), FONT, 0.6, TEXT, 1, cv2.LINE_AA)


def draw_countdown(canvas: np.ndarray, controller: SessionController, now: Optional[float] = None):
    """Dimmed preview with a pulsing ring and the seconds left (a star when the shot is due)."""
    px, py, w, h = preview_rect((canvas.shape[1], canvas.shape[0]), controller.config.resolution)
    if w <= 0 or h <= 0:
        return

    _shade(canvas, px, py, px + w, py + h, 120 / 255)

    left = controller.remaining(now)
    t = (left % 1.0)
    ring = 20 + 40 * t
    radius = int(min((160 + ring) / 2, min(w, h) / 2 - 4))
    center = (px + w // 2, py + h // 2)
    if radius > 0:
        cv2.circle(canvas, center, radius, (255, 255, 255), 4, cv2.LINE_AA)

    seconds = controller.countdown_seconds(now)
    label = "*" if seconds == 0 else str(seconds)
    (tw, th), _ = cv2.getTextSize(label, FONT, 2.0, 3)
    cv2.putText(
        canvas, label, (center[0] - tw // 2, center[1] + th // 2),
        FONT, 2.0, (255, 255, 255), 3, cv2.LINE_AA,
    )


def draw_strip(canvas: np.ndarray, controller: SessionController):
    """Strip on paper with a drop shadow, never scaled above 1:1."""
    win_h, win_w = canvas.shape[:2]
    panel_w = int(min(PANEL_MAX_W, win_w * 0.45))
    x = MARGIN + panel_w + MARGIN
    y = MARGIN
    avail_w = win_w - (MARGIN + panel_w + 2 * MARGIN)
    avail_h = win_h - 2 * MARGIN
    if avail_w <= 0 or avail_h <= 0:
        return

    strip = controller.preview_strip()
    strip_h, strip_w = strip.shape[:2]
    s = min(avail_w / strip_w, avail_h / strip_h, 1.0)
    out_w, out_h = max(1, int(strip_w * s)), max(1, int(strip_h * s))
    dx = x + max(0, (avail_w - out_w) // 2)
    dy = y + max(0, (avail_h - out_h) // 2)

    shadow = int(18 * s)
    _shade(canvas, dx + shadow, dy + shadow, dx + shadow + out_w, dy + shadow + out_h, 120 / 255)
    cv2.rectangle(canvas, (dx, dy), (dx + out_w - 1, dy + out_h - 1), (PAPER,) * 3, -1)

    scaled = cv2.resize(strip, (out_w, out_h), interpolation=cv2.INTER_AREA)
    _paste(canvas, cv2.cvtColor(scaled, cv2.COLOR_RGBA2BGR), dx, dy)


def render(
    controller: SessionController,
    frame: Optional[np.ndarray],
    size: Tuple[int, int] = (1280, 720),
    now: Optional[float] = None,
) -> np.ndarray:
    """Full booth screen as a BGR image of ``size`` (width, height)."""
    width, height = size
    canvas = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)

    draw_preview_panel(canvas, controller, frame)
    draw_strip(canvas, controller)

    if controller.state == "counting_down":
        draw_countdown(canvas, controller, now)

    cv2.putText(
        canvas, "Controls: S = Start | R = Reset | P = Save | Q = Quit",
        (20, height - 20), FONT, 0.5, (200, 200, 200), 1, cv2.LINE_AA,
    )
    return canvas
