"""
Configuration Tests
===================
"""

from pathlib import Path

import pytest

from photostrip.config import BoothConfig, load_config


class TestBoothConfig:

    def test_defaults(self):
        config = BoothConfig()
        assert config.frames == 4
        assert config.interval == 3.0
        assert config.resolution == (360, 270)
        assert (config.pad, config.gap) == (20, 16)
        assert config.output_path == Path("output") / "photobooth_strip.png"

    def test_reference_strip_size(self):
        assert BoothConfig().strip_size == (400, 1168)

    def test_resolution_from_list(self):
        config = BoothConfig(resolution=[640, 480], output_dir="shots")
        assert config.resolution == (640, 480)
        assert config.width == 640 and config.height == 480
        assert config.output_dir == Path("shots")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"frames": 0},
            {"interval": 0},
            {"resolution": (0, 270)},
            {"resolution": (360,)},
            {"pad": -1},
            {"gap": -5},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            BoothConfig(**kwargs)

    def test_overrides_skip_none(self):
        config = BoothConfig().with_overrides(frames=3, camera_index=None)
        assert config.frames == 3
        assert config.camera_index == 0


class TestLoadConfig:

    def test_no_file(self):
        assert load_config() == BoothConfig()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "booth.yaml"
        path.write_text("frames: 3\ninterval: 2.5\nresolution: [320, 240]\n")

        config = load_config(path)

        assert config.frames == 3
        assert config.interval == 2.5
        assert config.resolution == (320, 240)

    def test_overrides_win(self, tmp_path):
        path = tmp_path / "booth.yaml"
        path.write_text("camera_index: 1\n")
        assert load_config(path, camera_index=2).camera_index == 2

    def test_empty_file(self, tmp_path):
        path = tmp_path / "booth.yaml"
        path.write_text("")
        assert load_config(path) == BoothConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "booth.yaml"
        path.write_text("contrast: 2.0\n")
        with pytest.raises(ValueError, match="contrast"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "booth.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)
