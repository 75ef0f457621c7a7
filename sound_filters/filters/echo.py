"""Echo effect backed by a circular delay buffer."""

import logging
import math
import numbers
from enum import Enum

import numpy as np

from sound_filters.audio.codec import BYTES_PER_SAMPLE, to_samples
from sound_filters.errors import InvalidParameterError
from sound_filters.filters.base import SoundFilter

logger = logging.getLogger(__name__)

# Echo tail is considered inaudible below 1% of the source amplitude
FINAL_DECAY = 0.01

_INT16_MIN = -32768
_INT16_MAX = 32767


class OverflowPolicy(Enum):
    WRAP = "wrap"
    SATURATE = "saturate"


class EchoFilter(SoundFilter):
    """Add a decaying echo to 16-bit PCM audio.

    ``num_delay_samples`` sets how long before the echo is first heard: for
    a one second echo on mono 44100 Hz audio use 44100. ``decay`` is how
    loud each echo is relative to what it repeats, so 0.5 means the echo is
    half as loud as the source.

    Every output sample is the input plus ``decay`` times the sample written
    ``num_delay_samples`` earlier. The mixed sample, not the dry one, goes
    back into the delay buffer, so the echo itself is echoed again.
    """

    def __init__(
        self,
        num_delay_samples: int,
        decay: float,
        overflow: OverflowPolicy = OverflowPolicy.WRAP,
    ):
        if (
            not isinstance(num_delay_samples, numbers.Integral)
            or isinstance(num_delay_samples, bool)
            or num_delay_samples <= 0
        ):
            raise InvalidParameterError(
                f"num_delay_samples must be a positive integer, got {num_delay_samples!r}"
            )
        # checked after the float32 cast so values rounding to 0 or 1 are rejected
        if not isinstance(decay, numbers.Real) or not 0.0 < np.float32(decay) < 1.0:
            raise InvalidParameterError(f"decay must be in (0, 1), got {decay!r}")
        try:
            self._overflow = OverflowPolicy(overflow)
        except ValueError as e:
            raise InvalidParameterError(f"Unknown overflow policy: {overflow!r}") from e

        self._delay = np.zeros(int(num_delay_samples), dtype=np.int16)
        self._position = 0
        # Mixing runs in single precision
        self._decay = np.float32(decay)
        logger.debug(
            "EchoFilter created: %d delay samples, decay %.3f, overflow %s",
            num_delay_samples, decay, self._overflow.value,
        )

    @property
    def num_delay_samples(self) -> int:
        return len(self._delay)

    @property
    def decay(self) -> float:
        return float(self._decay)

    @property
    def overflow(self) -> OverflowPolicy:
        return self._overflow

    @property
    def position(self) -> int:
        """Index of the delay slot the next sample reads and overwrites."""
        return self._position

    @property
    def delay_buffer(self) -> np.ndarray:
        return self._delay.copy()

    def reset(self) -> None:
        """Clear the delay buffer and rewind to its first slot."""
        self._delay.fill(0)
        self._position = 0
        logger.debug("EchoFilter reset")

    def remaining_size(self) -> int:
        """Bytes of echo left after the sound ends.

        Enough whole passes over the delay buffer for the echo to fall
        below 1% of the original amplitude, from ``decay ** n <= 0.01``.
        """
        repeats = math.ceil(math.log(FINAL_DECAY) / math.log(float(self._decay)))
        return repeats * len(self._delay) * BYTES_PER_SAMPLE

    def _filter_range(self, buffer, offset: int, length: int) -> None:
        samples = to_samples(buffer, offset, length)
        size = len(self._delay)
        done = 0

        # A run never laps the delay buffer, so every slot it reads still
        # holds the value from one full delay ago.
        while done < len(samples):
            run = min(len(samples) - done, size - self._position)
            start = self._position
            dry = samples[done:done + run]
            delayed = self._delay[start:start + run]

            mixed = dry.astype(np.float32) + self._decay * delayed.astype(np.float32)
            wet = self._narrow(mixed)

            dry[:] = wet
            self._delay[start:start + run] = wet

            self._position = (start + run) % size
            done += run

    def _narrow(self, mixed: np.ndarray) -> np.ndarray:
        """Convert mixed amplitudes to int16, truncating toward zero."""
        truncated = mixed.astype(np.int32)
        if self._overflow is OverflowPolicy.SATURATE:
            truncated = np.clip(truncated, _INT16_MIN, _INT16_MAX)
        # int32 -> int16 drops the high bits
        return truncated.astype(np.int16)
