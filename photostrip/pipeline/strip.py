import cv2
import numpy as np
import logging
from typing import Optional, Sequence, Tuple
from pathlib import Path

from photostrip.errors import InvalidDimensions


PAPER = 250
OUTLINE = (200, 200, 200, 255)
LABEL = "PHOTO STRIP - Greyscale"
LABEL_COLOR = (110, 110, 110, 255)


def strip_size(frame_w: int, frame_h: int, count: int, pad: int = 20, gap: int = 16) -> Tuple[int, int]:
    """(width, height) of a strip holding ``count`` frames."""
    width = frame_w + 2 * pad
    height = pad + count * frame_h + (count - 1) * gap + pad
    return width, height


def shot_offset(index: int, frame_h: int, pad: int = 20, gap: int = 16) -> Tuple[int, int]:
    """(x, y) of the top-left corner of shot ``index`` on the strip."""
    return pad, pad + index * (frame_h + gap)


def _draw_label(canvas: np.ndarray, pad: int):
    """Header text centred in the top margin, skipped when the margin is too thin."""
    font = cv2.FONT_HERSHEY_SIMPLEX
    scale = 0.4
    (text_w, text_h), baseline = cv2.getTextSize(LABEL, font, scale, 1)

    # Keep the glyphs (and the outline row at pad - 1) clear of the shots
    if text_h + baseline + 4 > pad - 2:
        return

    x = max(0, (canvas.shape[1] - text_w) // 2)
    y = (pad - 2 + text_h - baseline) // 2
    cv2.putText(canvas, LABEL, (x, y), font, scale, LABEL_COLOR, 1, cv2.LINE_AA)


def compose_strip(
    shots: Sequence[np.ndarray],
    frame_w: int,
    frame_h: int,
    pad: int = 20,
    gap: int = 16,
    slots: Optional[int] = None,
) -> np.ndarray:
    """
    Lay out shots top to bottom on a paper-coloured RGBA canvas.

    Shot ``i`` lands at (pad, pad + i * (frame_h + gap)). ``slots`` sizes the
    canvas for more frames than are present (partial preview while capturing);
    by default the canvas fits exactly ``len(shots)``.

    The outline around each shot and the header label are drawn outside the
    shot rectangles, so shot pixels are copied unchanged. The result depends
    only on the inputs.
    """
    count = len(shots) if slots is None else slots
    if count < 1:
        raise ValueError("Cannot compose a strip with no frames")
    if len(shots) > count:
        raise ValueError(f"{len(shots)} shots do not fit in {count} slots")

    width, height = strip_size(frame_w, frame_h, count, pad, gap)
    canvas = np.full((height, width, 4), PAPER, dtype=np.uint8)
    canvas[..., 3] = 255

    _draw_label(canvas, pad)

    # Outlines first: with a zero gap they would otherwise cut into a neighbour
    if pad > 0:
        for i in range(count):
            x, y = shot_offset(i, frame_h, pad, gap)
            cv2.rectangle(canvas, (x - 1, y - 1), (x + frame_w, y + frame_h), OUTLINE, 1)

    # Anti-aliased drawing may blend alpha too on some OpenCV builds; paper stays opaque
    canvas[..., 3] = 255

    for i, shot in enumerate(shots):
        x, y = shot_offset(i, frame_h, pad, gap)
        if shot.shape[:2] != (frame_h, frame_w):
            raise InvalidDimensions(
                f"Shot {i} is {shot.shape[1]}x{shot.shape[0]}, expected {frame_w}x{frame_h}"
            )

        if shot.ndim == 2:
            canvas[y:y + frame_h, x:x + frame_w, :3] = shot[..., None]
            canvas[y:y + frame_h, x:x + frame_w, 3] = 255
        elif shot.shape[2] == 4:
            canvas[y:y + frame_h, x:x + frame_w] = shot
        elif shot.shape[2] == 3:
            canvas[y:y + frame_h, x:x + frame_w, :3] = shot
            canvas[y:y + frame_h, x:x + frame_w, 3] = 255
        else:
            raise InvalidDimensions(f"Shot {i} has unsupported shape {shot.shape}")

    canvas.flags.writeable = False
    return canvas


class StripWriter:
    """
    Persists a composed strip to disk as an image file.
    """

    def __init__(self):
        self.log = logging.getLogger("StripWriter")

    def save(self, image: np.ndarray, path: Path) -> bool:
        """
        Save the strip to disk.

        :param image: RGBA (or RGB) strip
        :param path: Output path, format picked from the extension
        :return: True if successful, False otherwise
        """
        if image is None:
            self.log.error("Cannot save None image")
            return False

        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            if image.ndim == 3 and image.shape[2] == 4:
                bgr = cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)
            elif image.ndim == 3:
                bgr = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)
            else:
                bgr = image

            if not cv2.imwrite(str(path), bgr):
                self.log.error(f"OpenCV could not write {path}")
                return False

            self.log.info(f"Saved strip to {path}")
            return True
        except Exception as e:
            self.log.error(f"Failed to save image: {e}")
            return False
