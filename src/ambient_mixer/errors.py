"""Error types for the ambient mixer."""

from __future__ import annotations


class MixerError(Exception):
    """Base class for recoverable mixer errors."""


class DuplicateOrInvalidSource(MixerError):
    """A sound source could not be turned into a playback channel."""


class NoMediaFound(MixerError):
    """No playable source was found across all roots."""

    def __init__(self, message: str = "no media found") -> None:
        super().__init__(message)
