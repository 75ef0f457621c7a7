"""Abstract base for sound filters."""

from abc import ABC, abstractmethod

from sound_filters.audio.codec import byte_length, check_range, check_writable


class SoundFilter(ABC):
    """Filter applied in place to 16-bit signed little-endian PCM bytes.

    Filters may keep internal buffers of past samples, so a new instance
    should be created for every sound played. An instance can be reused
    once the sound is finished by calling ``reset()``.
    """

    def reset(self) -> None:
        """Clear internal state. Does nothing by default."""

    def remaining_size(self) -> int:
        """Bytes the filter still produces after the sound ends. 0 by default."""
        return 0

    def filter(self, buffer, offset: int = 0, length: int | None = None) -> None:
        """Filter ``length`` bytes of ``buffer`` starting at ``offset``.

        With ``length`` omitted the rest of the buffer is filtered, so
        ``filter(buffer)`` processes the whole buffer.

        Raises:
            OutOfBoundsError: If the range is invalid or not sample-aligned.
            TypeError: If the buffer is read-only or not contiguous.
        """
        if length is None:
            length = byte_length(buffer) - offset
        check_range(buffer, offset, length)
        check_writable(buffer)
        if length == 0:
            return
        self._filter_range(buffer, offset, length)

    @abstractmethod
    def _filter_range(self, buffer, offset: int, length: int) -> None:
        """Transform a validated, non-empty, sample-aligned byte range."""
