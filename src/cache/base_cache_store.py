# src/cache/base_cache_store.py - v2
"""Abstract suggestion cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from unitgen.cache.models import CacheLookupResult
from unitgen.core.models import Suggestion


class BaseSuggestionCache(ABC):
    """Write-once store of suggestion sets keyed by content fingerprint."""

    @abstractmethod
    async def lookup(self, fingerprint: str) -> CacheLookupResult:
        """Return the stored set, or a miss result when none exists.

        Raises:
            CacheReadError: An entry exists but cannot be read or decoded.
        """

    @abstractmethod
    async def store(self, fingerprint: str, suggestions: list[Suggestion]) -> Path:
        """Persist a suggestion set and return the entry location.

        Raises:
            CacheWriteError: The entry could not be written.
        """

    @abstractmethod
    def entry_path(self, fingerprint: str) -> Path:
        """Location of the entry for a fingerprint."""
