# src/cache/json_store.py - v2
"""JSON file-based suggestion cache.

One file per fingerprint under the cache root, named by the fingerprint
hex with no extension, holding a JSON array of {title, reasons} objects.
Entries are written to a temporary file in the same directory and renamed
into place, so readers never see a partial entry and two invocations
racing on the same new fingerprint both end with the same complete file.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from unitgen.cache.base_cache_store import BaseSuggestionCache
from unitgen.cache.fingerprint import is_fingerprint
from unitgen.cache.models import CacheLookupResult
from unitgen.core.errors import CacheReadError, CacheWriteError, ConfigurationError
from unitgen.core.models import SUGGESTION_LIST, Suggestion

logger = logging.getLogger(__name__)


class JsonSuggestionCache(BaseSuggestionCache):
    """File-based suggestion cache using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create cache directory {self._root}: {e}"
            ) from e

    @property
    def root(self) -> Path:
        return self._root

    async def lookup(self, fingerprint: str) -> CacheLookupResult:
        """Read the entry for fingerprint off the event loop."""
        return await asyncio.to_thread(self._read, fingerprint)

    async def store(self, fingerprint: str, suggestions: list[Suggestion]) -> Path:
        """Write the entry for fingerprint off the event loop."""
        return await asyncio.to_thread(self._write, fingerprint, list(suggestions))

    def entry_path(self, fingerprint: str) -> Path:
        """Return file path for a fingerprint."""
        if not is_fingerprint(fingerprint):
            raise ValueError(f"Not a content fingerprint: {fingerprint!r}")
        return self._root / fingerprint

    def _read(self, fingerprint: str) -> CacheLookupResult:
        path = self.entry_path(fingerprint)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("Cache miss for %s", fingerprint)
            return CacheLookupResult(fingerprint=fingerprint, path=path)
        except OSError as e:
            raise CacheReadError(fingerprint, str(e)) from e

        try:
            suggestions = SUGGESTION_LIST.validate_json(raw)
        except ValidationError as e:
            raise CacheReadError(fingerprint, f"invalid entry at {path}: {e}") from e

        logger.debug("Cache hit for %s (%d suggestions)", fingerprint, len(suggestions))
        return CacheLookupResult(
            fingerprint=fingerprint, path=path, suggestions=suggestions
        )

    def _write(self, fingerprint: str, suggestions: list[Suggestion]) -> Path:
        path = self.entry_path(fingerprint)
        payload = json.dumps(
            [s.model_dump() for s in suggestions], ensure_ascii=False, indent=2
        )
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._root, prefix=f".{fingerprint[:12]}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheWriteError(fingerprint, str(e)) from e

        logger.debug("Cached %d suggestions at %s", len(suggestions), path)
        return path
