"""Exceptions raised by a playlist refresh cycle.

Every failure of a refresh surfaces as a :class:`RefreshError`. The
subclasses tell the caller which stage failed; the underlying library
exception is always chained as ``__cause__``.
"""


class RefreshError(Exception):
    """A refresh cycle failed and the cache was left untouched."""


class TransportError(RefreshError):
    """The playlist endpoint could not be reached or answered with an error."""


class DeserializationError(RefreshError):
    """The playlist payload could not be decoded into playlist items."""


class StorageError(RefreshError):
    """The cache could not be written."""
