# src/cache/models.py - v2
"""Cache domain models: CacheLookupResult."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from unitgen.core.models import Suggestion


class CacheLookupResult(BaseModel):
    """Outcome of a cache lookup.

    suggestions is None when nothing is stored for the fingerprint. A stored
    empty list comes back as [] so the two cases never collapse.
    """

    fingerprint: str
    path: Path
    suggestions: list[Suggestion] | None = None

    @property
    def is_hit(self) -> bool:
        return self.suggestions is not None
