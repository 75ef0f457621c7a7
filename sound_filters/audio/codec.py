"""16-bit signed little-endian PCM sample codec.

All functions work on flat byte buffers (``bytearray``, writable
``memoryview`` or anything else exposing a contiguous buffer). Offsets and
positions are byte offsets, whatever the item size of the buffer, so an
``array.array("h")`` or an int16 ndarray is addressed byte by byte too.
"""

import numpy as np

from sound_filters.errors import OutOfBoundsError

BYTES_PER_SAMPLE = 2

# int16, little-endian regardless of host byte order
SAMPLE_DTYPE = np.dtype("<i2")


def byte_view(buffer) -> memoryview:
    """Flat unsigned-byte view over ``buffer``.

    Raises:
        TypeError: If the buffer is not contiguous or its item format
            cannot be viewed as bytes.
    """
    view = memoryview(buffer)
    if view.format == "B" and view.ndim == 1:
        return view
    return view.cast("B")


def byte_length(buffer) -> int:
    return memoryview(buffer).nbytes


def _check_position(view: memoryview, position: int) -> None:
    if position < 0 or position + 1 >= view.nbytes:
        raise OutOfBoundsError(
            f"Sample position {position} out of range for buffer of {view.nbytes} bytes"
        )


def check_range(buffer, offset: int, length: int) -> None:
    """Validate a byte range holding whole samples.

    Raises:
        OutOfBoundsError: If the range is negative, odd-sized or runs past
            the end of the buffer.
    """
    size = byte_length(buffer)
    if offset < 0 or length < 0:
        raise OutOfBoundsError(f"Negative offset/length: {offset}, {length}")
    if length % BYTES_PER_SAMPLE != 0:
        raise OutOfBoundsError(f"Length must cover whole samples, got {length} bytes")
    if offset + length > size:
        raise OutOfBoundsError(
            f"Range [{offset}, {offset + length}) exceeds buffer of {size} bytes"
        )


def check_writable(buffer) -> None:
    if memoryview(buffer).readonly:
        raise TypeError(f"Buffer of type {type(buffer).__name__} is read-only")


def get_sample(buffer, position: int) -> int:
    """Read the sample stored at ``position`` and ``position + 1``."""
    view = byte_view(buffer)
    _check_position(view, position)
    sample = (view[position + 1] << 8) | view[position]
    # sign-extend from 16 bits
    return sample - 0x10000 if sample & 0x8000 else sample


def set_sample(buffer, position: int, sample: int) -> None:
    """Store ``sample`` as two little-endian bytes at ``position``.

    Only the low 16 bits of ``sample`` are kept.
    """
    view = byte_view(buffer)
    _check_position(view, position)
    check_writable(view)
    view[position] = sample & 0xFF
    view[position + 1] = (sample >> 8) & 0xFF


def to_samples(buffer, offset: int = 0, length: int | None = None) -> np.ndarray:
    """Return an int16 view over ``length`` bytes of ``buffer`` at ``offset``.

    The view shares memory with the buffer, so it is writable whenever the
    buffer is.

    Example:
        >>> buf = bytearray(b"\\xe8\\x03\\x18\\xfc")
        >>> to_samples(buf)  # [1000, -1000]
    """
    if length is None:
        length = byte_length(buffer) - offset
    check_range(buffer, offset, length)
    if length == 0:
        return np.empty(0, dtype=SAMPLE_DTYPE)
    return np.frombuffer(
        byte_view(buffer), dtype=SAMPLE_DTYPE, count=length // BYTES_PER_SAMPLE, offset=offset
    )
