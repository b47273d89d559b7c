# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

Suggestion is the unit both the cache and the providers speak in;
SuggestionResult is the envelope models are constrained to return.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter


class Suggestion(BaseModel):
    """One candidate unit test: a title and the reasons it is worth writing."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    reasons: list[str]


class SuggestionResult(BaseModel):
    """Structured-output schema for the suggestion phase.

    extra="forbid" emits additionalProperties=false, which OpenAI strict
    json_schema mode requires.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    suggestions: list[Suggestion]


# Serialized form of a SuggestionSet: a bare JSON array of suggestions.
SUGGESTION_LIST = TypeAdapter(list[Suggestion])
