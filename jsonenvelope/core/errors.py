"""Exception types raised by envelope encoding, decoding and item access.

Every failure is local to the operation that raised it; callers decide how
to recover. ``EndOfItems`` is the normal way a cursor loop finishes.
"""
from __future__ import annotations


class EnvelopeError(Exception):
    """Base class for all envelope errors."""


class EncodingError(EnvelopeError):
    """A value could not be converted to its JSON representation."""


class DecodingError(EnvelopeError):
    """Inbound bytes do not match the expected envelope shape."""


class NoSuchItemError(EnvelopeError, IndexError):
    """The item cursor points past the stored items."""

    def __init__(self, position: int, count: int):
        super().__init__(f"no such item: position {position} of {count} item(s)")
        self.position = position
        self.count = count


class EndOfItems(EnvelopeError):
    """The cursor is already on the last item and cannot advance."""


__all__ = [
    "EnvelopeError",
    "EncodingError",
    "DecodingError",
    "NoSuchItemError",
    "EndOfItems",
]
