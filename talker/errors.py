"""talker/errors.py

Error taxonomy for the conversation client.
Every error raised by the package derives from TalkerError so callers can
catch the whole family in one place.
"""

from __future__ import annotations


class TalkerError(Exception):
    """Base class for all talker errors."""


class ConfigError(TalkerError):
    """Missing or invalid construction parameters (e.g. an empty API key)."""


class ValidationError(TalkerError, ValueError):
    """A message could not be built from the supplied role and content."""


class UnsupportedModelError(TalkerError):
    """No tokenizer is available for the configured model."""

    def __init__(self, model: str) -> None:
        super().__init__(f"No tokenizer available for model: {model!r}")
        self.model = model


class RemoteCallError(TalkerError):
    """The completion round-trip failed (network, status or payload).

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
