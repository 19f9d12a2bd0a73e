"""Exception types raised by DocMatch."""

from __future__ import annotations


class DocMatchError(Exception):
    """Base class for DocMatch failures."""


class ConfigurationError(DocMatchError):
    """Required configuration (endpoint, credentials) is missing or invalid."""


class EnumerationError(DocMatchError):
    """A document collection could not be listed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Cannot enumerate {location}: {reason}")
        self.location = location
        self.reason = reason
