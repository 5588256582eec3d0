import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoothConfig:
    """
    Booth settings. Everything here is fixed for the lifetime of a session.

    The film look itself (contrast, gamma, grain, vignette) is not
    configurable; see photostrip.pipeline.filters for its constants.
    """
    frames: int = 4
    interval: float = 3.0                       # seconds between countdown start and shot
    resolution: Tuple[int, int] = (360, 270)    # (width, height) of every shot
    pad: int = 20                               # strip margin around the shots
    gap: int = 16                               # vertical space between shots
    camera_index: int = 0
    output_dir: Path = field(default_factory=lambda: Path("output"))
    filename: str = "photobooth_strip.png"
    window_name: str = "Photo Strip"

    def __post_init__(self):
        # Accept lists / strings straight from YAML
        object.__setattr__(self, "resolution", tuple(int(v) for v in self.resolution))
        object.__setattr__(self, "output_dir", Path(self.output_dir))

        if self.frames < 1:
            raise ValueError(f"frames must be >= 1, got {self.frames}")
        if self.interval <= 0:
            raise ValueError(f"interval must be > 0, got {self.interval}")
        if len(self.resolution) != 2 or min(self.resolution) <= 0:
            raise ValueError(f"resolution must be (width, height) > 0, got {self.resolution}")
        if self.pad < 0 or self.gap < 0:
            raise ValueError(f"pad and gap must be >= 0, got pad={self.pad} gap={self.gap}")

    @property
    def width(self) -> int:
        return self.resolution[0]

    @property
    def height(self) -> int:
        return self.resolution[1]

    @property
    def strip_size(self) -> Tuple[int, int]:
        """(width, height) of the composed strip."""
        w = self.width + 2 * self.pad
        h = self.pad + self.frames * self.height + (self.frames - 1) * self.gap + self.pad
        return w, h

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.filename

    def with_overrides(self, **overrides: Any) -> "BoothConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def load_config(path: Optional[Path] = None, **overrides: Any) -> BoothConfig:
    """
    Build a BoothConfig from an optional YAML file plus keyword overrides.

    Unknown keys in the file are rejected so typos do not go unnoticed.
    """
    data: Dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(BoothConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

        logger.info("Loaded booth config from %s", path)

    config = BoothConfig(**data)
    return config.with_overrides(**overrides)
