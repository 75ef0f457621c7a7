"""Reader that applies a SoundFilter to audio pulled from a byte source."""

import logging

from sound_filters.audio.codec import BYTES_PER_SAMPLE
from sound_filters.filters.base import SoundFilter

logger = logging.getLogger(__name__)

_READ_ALL_CHUNK = 64 * 1024


class FilteredSoundStream:
    """Wrap a binary source and filter every chunk read from it.

    Once the source is exhausted the stream keeps returning filtered
    silence until ``sound_filter.remaining_size()`` bytes have been
    produced, so effects that outlast the sound (echo) are heard in full.
    """

    def __init__(self, source, sound_filter: SoundFilter):
        self._source = source
        self._filter = sound_filter
        self._pending = b""
        self._source_done = False
        self._tail_left = 0

    @property
    def sound_filter(self) -> SoundFilter:
        return self._filter

    @property
    def exhausted(self) -> bool:
        """True once both the source and the filter tail are used up."""
        return self._source_done and self._tail_left == 0

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` filtered bytes; ``-1`` reads to the end.

        Only whole samples are returned, so a ``size`` below 2 still yields
        one sample.
        """
        if size is None or size < 0:
            parts = []
            while True:
                chunk = self.read(_READ_ALL_CHUNK)
                if not chunk:
                    break
                parts.append(chunk)
            return b"".join(parts)
        if size == 0:
            return b""

        while not self._source_done:
            data = self._read_source(size)
            if data:
                return data

        return self._read_tail(size)

    def _read_source(self, size: int) -> bytes:
        raw = self._source.read(max(size - len(self._pending), 1))
        if not raw:
            if self._pending:
                logger.warning(
                    "Dropping %d trailing byte(s) that do not form a sample",
                    len(self._pending),
                )
                self._pending = b""
            self._source_done = True
            self._tail_left = self._filter.remaining_size()
            logger.debug("Source exhausted, %d bytes of tail left", self._tail_left)
            return b""

        data = bytearray(self._pending)
        data += raw
        usable = len(data) - len(data) % BYTES_PER_SAMPLE
        self._pending = bytes(data[usable:])
        del data[usable:]
        if data:
            self._filter.filter(data)
        return bytes(data)

    def _read_tail(self, size: int) -> bytes:
        size -= size % BYTES_PER_SAMPLE
        count = min(max(size, BYTES_PER_SAMPLE), self._tail_left)
        if count == 0:
            return b""
        data = bytearray(count)
        self._filter.filter(data)
        self._tail_left -= count
        return bytes(data)

    def reset(self) -> None:
        """Reset the filter and the tail. The source is not rewound."""
        self._filter.reset()
        self._pending = b""
        self._source_done = False
        self._tail_left = 0

    def close(self) -> None:
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "FilteredSoundStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
