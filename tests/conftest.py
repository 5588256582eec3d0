"""
Test Configuration
==================

Pytest fixtures and test doubles for the photo strip booth.
"""

import numpy as np
import pytest

from photostrip.config import BoothConfig
from photostrip.pipeline import FrameProcessor, SessionController


class FakeCamera:
    """Serves queued frames first, then ``default`` forever (None = no frame)."""

    def __init__(self, frames=(), default=None):
        self.frames = list(frames)
        self.default = default
        self.calls = 0

    def current_frame(self):
        self.calls += 1
        if self.frames:
            item = self.frames.pop(0)
        else:
            item = self.default
        if isinstance(item, Exception):
            raise item
        return item


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ConstantNoise:
    """Stands in for numpy's Generator: every draw returns ``value``."""

    def __init__(self, value=0.0):
        self.value = value
        self.calls = 0

    def uniform(self, low, high, size=None):
        self.calls += 1
        return np.full(size, self.value, dtype=np.float64)


class MemoryWriter:
    """Persistence sink that keeps saved images in memory."""

    def __init__(self, succeed=True):
        self.saved = []
        self.succeed = succeed

    def save(self, image, path):
        self.saved.append((np.array(image), path))
        return self.succeed


def make_raw(width, height, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


@pytest.fixture
def small_config(tmp_path):
    """Tiny frames so session tests stay fast."""
    return BoothConfig(
        frames=4,
        interval=3.0,
        resolution=(8, 6),
        pad=4,
        gap=2,
        output_dir=tmp_path,
    )


@pytest.fixture
def raw_frame():
    return make_raw(8, 6)


@pytest.fixture
def zero_noise():
    return ConstantNoise(0.0)


@pytest.fixture
def camera(raw_frame):
    return FakeCamera(default=raw_frame)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def writer():
    return MemoryWriter()


@pytest.fixture
def controller(camera, small_config, zero_noise, writer, clock):
    processor = FrameProcessor(small_config.width, small_config.height, rng=zero_noise)
    return SessionController(camera, small_config, processor=processor, writer=writer, clock=clock)
