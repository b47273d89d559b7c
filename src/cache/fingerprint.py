# src/cache/fingerprint.py - v3
"""Content fingerprinting for the suggestion cache.

A fingerprint is the SHA-256 of the raw source bytes, hex encoded. It is
used only as a cache key, so no normalization is applied: any byte-level
change to the file produces a new key and therefore a fresh suggestion set.
"""

from __future__ import annotations

import hashlib

FINGERPRINT_LENGTH = 64


def compute_fingerprint(content: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of content."""
    return hashlib.sha256(content).hexdigest()


def is_fingerprint(value: str) -> bool:
    """Whether value looks like a fingerprint produced by compute_fingerprint."""
    if len(value) != FINGERPRINT_LENGTH:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return value == value.lower()
