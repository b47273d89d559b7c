# src/core/errors.py - v1
"""Exception hierarchy for the suggestion and generation pipeline.

A cache miss is not an error: it is reported through
CacheLookupResult.suggestions being None. Everything here except
CacheWriteError aborts the current invocation.
"""

from __future__ import annotations


class UnitGenError(Exception):
    """Base class for all unitgen failures."""


class ConfigurationError(UnitGenError):
    """Settings, credentials or cache root are unusable."""


class CacheReadError(UnitGenError):
    """An existing cache entry could not be read or decoded."""

    def __init__(self, fingerprint: str, reason: str) -> None:
        self.fingerprint = fingerprint
        self.reason = reason
        super().__init__(f"Failed to read cached suggestions for {fingerprint}: {reason}")


class CacheWriteError(UnitGenError):
    """A suggestion set could not be persisted."""

    def __init__(self, fingerprint: str, reason: str) -> None:
        self.fingerprint = fingerprint
        self.reason = reason
        super().__init__(f"Failed to write cached suggestions for {fingerprint}: {reason}")


class ProviderCallError(UnitGenError):
    """Network, auth, rate-limit or timeout failure from an LLM backend."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider} API call failed: {message}")


class MalformedResponseError(UnitGenError):
    """Provider output failed JSON decoding or schema validation."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"Malformed {provider} response: {message}")


class InvalidSelectionError(UnitGenError):
    """User selection is not a number within 1..N."""
