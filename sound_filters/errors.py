"""Errors raised by sound filters and the sample codec."""


class OutOfBoundsError(IndexError):
    """Offset, length or sample position falls outside the buffer."""


class InvalidParameterError(ValueError):
    """Filter or config parameter outside its valid range."""
