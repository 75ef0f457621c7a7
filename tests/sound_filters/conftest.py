"""Shared helpers for sound_filters tests."""

import numpy as np
import pytest


def pcm(*samples: int) -> bytearray:
    """Pack samples as 16-bit signed little-endian bytes."""
    return bytearray(np.array(samples, dtype="<i2").tobytes())


def unpack(buffer) -> np.ndarray:
    return np.frombuffer(bytes(buffer), dtype="<i2")


@pytest.fixture
def impulse():
    """One 1000 impulse followed by silence, 12 samples."""
    return pcm(1000, *([0] * 11))
