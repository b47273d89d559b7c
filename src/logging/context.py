# src/logging/context.py - v2
"""Contextual logging support: attach fingerprint, provider and pipeline
state to log records of the current invocation.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_state: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "state", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    fingerprint: str | None = None
    provider: str | None = None
    state: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        fingerprint=_fingerprint.get(),
        provider=_provider.get(),
        state=_state.get(),
    )


def set_invocation_context(fingerprint: str, provider: str) -> None:
    """Set invocation-level context (once the content is fingerprinted)."""
    _fingerprint.set(fingerprint)
    _provider.set(provider)


def set_state_context(state: str) -> None:
    """Record the orchestrator state the following records belong to."""
    _state.set(state)


def clear_context() -> None:
    """Reset all context variables."""
    _fingerprint.set(None)
    _provider.set(None)
    _state.set(None)
