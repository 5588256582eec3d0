"""
CLI Tests
=========
"""

import cv2
import numpy as np
import pytest

from photostrip.cli import build_parser, main


def write_image(path, width=64, height=48, value=128):
    cv2.imwrite(str(path), np.full((height, width, 3), value, dtype=np.uint8))
    return path


class TestProcess:

    def test_process_single_image(self, tmp_path):
        src = write_image(tmp_path / "in.png")
        dst = tmp_path / "out.png"

        assert main(["process", str(src), str(dst)]) == 0

        out = cv2.imread(str(dst), cv2.IMREAD_UNCHANGED)
        assert out.shape == (48, 64, 4)
        assert np.array_equal(out[..., 0], out[..., 1])

    def test_process_missing_input(self, tmp_path):
        with pytest.raises(ValueError):
            main(["process", str(tmp_path / "nope.png"), str(tmp_path / "out.png")])


class TestStrip:

    def test_strip_from_images(self, tmp_path):
        images = [str(write_image(tmp_path / f"{i}.png", value=40 * (i + 1))) for i in range(2)]
        out = tmp_path / "strip.png"

        assert main(["strip", *images, "--output", str(out)]) == 0

        strip = cv2.imread(str(out), cv2.IMREAD_UNCHANGED)
        # Two 360x270 shots: 20 + 270 + 16 + 270 + 20
        assert strip.shape == (596, 400, 4)

    def test_strip_uses_config_resolution(self, tmp_path):
        config = tmp_path / "booth.yaml"
        config.write_text("resolution: [40, 30]\npad: 20\ngap: 16\n")
        images = [str(write_image(tmp_path / f"{i}.png")) for i in range(3)]
        out = tmp_path / "strip.png"

        assert main(["strip", *images, "--config", str(config), "--output", str(out)]) == 0

        strip = cv2.imread(str(out), cv2.IMREAD_UNCHANGED)
        assert strip.shape == (20 + 3 * 30 + 2 * 16 + 20, 80, 4)


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_booth_options(self):
        args = build_parser().parse_args(["booth", "--camera", "2"])
        assert args.camera == 2
        assert args.config is None
