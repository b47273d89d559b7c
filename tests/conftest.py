# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides a scripted in-process provider, sample content and suggestions,
and a cache rooted in a temp directory. No network access.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import BaseModel

from unitgen.cache.json_store import JsonSuggestionCache
from unitgen.core.models import Suggestion
from unitgen.llm.base_client import BaseProvider
from unitgen.llm.models import LLMResponse, Message
from unitgen.logging.context import clear_context


class ScriptedProvider(BaseProvider):
    """BaseProvider returning queued contents in order. Records all calls."""

    def __init__(self, contents: list[str], name: str = "scripted") -> None:
        self._contents = list(contents)
        self._name = name
        self.calls: list[dict] = []

    @property
    def provider_name(self) -> str:
        return self._name

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        self.calls.append(
            {"messages": messages, "system": system, "response_format": response_format}
        )
        return LLMResponse(
            content=self._contents.pop(0),
            input_tokens=10,
            output_tokens=5,
            model="scripted-model",
            provider=self._name,
            latency_ms=1,
        )


# === FIXTURES: Sample data ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def sample_content() -> bytes:
    return b"func Add(a, b int) int { return a + b }"


@pytest.fixture
def sample_suggestions() -> list[Suggestion]:
    return [
        Suggestion(title="Test addition of positives", reasons=["basic case"]),
        Suggestion(
            title="Test addition with negatives",
            reasons=["sign handling", "commutativity"],
        ),
        Suggestion(title="Test zero identity", reasons=[]),
    ]


@pytest.fixture
def suggestions_json(sample_suggestions: list[Suggestion]) -> str:
    return json.dumps({"suggestions": [s.model_dump() for s in sample_suggestions]})


@pytest.fixture
def make_provider() -> type[ScriptedProvider]:
    """ScriptedProvider class; call with the queued response contents."""
    return ScriptedProvider


@pytest.fixture
def cache(tmp_path: Path) -> JsonSuggestionCache:
    return JsonSuggestionCache(cache_root=tmp_path / "cache")


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    return LLMResponse(
        content="ok",
        input_tokens=100,
        output_tokens=50,
        model="claude-3-5-haiku-latest",
        provider="anthropic",
        latency_ms=250,
    )
