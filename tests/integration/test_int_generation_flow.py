# tests/integration/test_int_generation_flow.py - v1
"""Integration: full invocation over the file-backed cache.

Wires GenerationOrchestrator to JsonSuggestionCache on a temp directory
and to the real adapters with their SDK client mocked at the network
boundary. Covers the first-run (miss, store) and second-run (hit) paths.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from unitgen.cache.fingerprint import compute_fingerprint
from unitgen.cache.json_store import JsonSuggestionCache
from unitgen.core.models import Suggestion
from unitgen.llm.adapters.anthropic_adapter import AnthropicAdapter
from unitgen.llm.adapters.openai_adapter import OpenAIAdapter
from unitgen.pipeline.orchestrator import GenerationOrchestrator, PipelineState
from unitgen.pipeline.output import FileSink
from unitgen.pipeline.selection import parse_selection

CODE = b"func Add(a, b int) int { return a + b }"
SUGGESTIONS = {"suggestions": [{"title": "Test addition of positives", "reasons": ["basic case"]}]}
GENERATED = "```go\nfunc TestAdd(t *testing.T) {\n\tif Add(1, 2) != 3 {\n\t\tt.Fail()\n\t}\n}\n```"
BODY = "func TestAdd(t *testing.T) {\n\tif Add(1, 2) != 3 {\n\t\tt.Fail()\n\t}\n}"


def _select_first(suggestions):
    return parse_selection("1", suggestions)


def _openai_completion(content: str) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=50, completion_tokens=25),
    )


def _openai(create: AsyncMock) -> OpenAIAdapter:
    adapter = OpenAIAdapter(api_key="sk-test")
    adapter._sdk_client = MagicMock()
    adapter._sdk_client.chat.completions.create = create
    return adapter


def _anthropic(create: AsyncMock) -> AnthropicAdapter:
    adapter = AnthropicAdapter(api_key="sk-ant-test")
    adapter._sdk_client = MagicMock()
    adapter._sdk_client.messages.create = create
    return adapter


def _anthropic_response(block: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(
        content=[block],
        usage=SimpleNamespace(input_tokens=50, output_tokens=25),
        model="claude-3-5-haiku-latest",
    )


class TestOpenAIFlow:
    @pytest.mark.asyncio
    async def test_first_run_then_cached_run(self, tmp_path: Path):
        cache = JsonSuggestionCache(tmp_path / "unit")
        fp = compute_fingerprint(CODE)

        create = AsyncMock(side_effect=[
            _openai_completion(json.dumps(SUGGESTIONS)),
            _openai_completion(GENERATED),
        ])
        first = await GenerationOrchestrator(
            _openai(create), cache, _select_first, language="Go"
        ).run(CODE)

        assert first.cache_hit is False
        assert first.fingerprint == fp
        assert first.suggestion == Suggestion(
            title="Test addition of positives", reasons=["basic case"]
        )
        assert first.artifact == BODY
        assert create.await_count == 2
        stored = json.loads((tmp_path / "unit" / fp).read_text(encoding="utf-8"))
        assert stored == SUGGESTIONS["suggestions"]

        # Same bytes again: only the generation call reaches the provider.
        create2 = AsyncMock(return_value=_openai_completion(GENERATED))
        orch = GenerationOrchestrator(_openai(create2), cache, _select_first)
        second = await orch.run(CODE)

        assert second.cache_hit is True
        assert second.suggestion == first.suggestion
        assert second.artifact == BODY
        assert create2.await_count == 1
        assert "response_format" not in create2.call_args.kwargs
        assert orch.state is PipelineState.DONE


class TestAnthropicFlow:
    @pytest.mark.asyncio
    async def test_tool_output_and_file_sink(self, tmp_path: Path):
        cache = JsonSuggestionCache(tmp_path / "unit")
        target = tmp_path / "unit_test.go"
        create = AsyncMock(side_effect=[
            _anthropic_response(SimpleNamespace(type="tool_use", input=SUGGESTIONS)),
            _anthropic_response(SimpleNamespace(type="text", text=GENERATED)),
        ])

        result = await GenerationOrchestrator(
            _anthropic(create), cache, _select_first, FileSink(target)
        ).run(CODE)

        assert result.artifact == BODY
        assert target.read_text(encoding="utf-8") == BODY + "\n"
        assert (tmp_path / "unit" / result.fingerprint).exists()

    @pytest.mark.asyncio
    async def test_cache_shared_across_providers(self, tmp_path: Path):
        cache = JsonSuggestionCache(tmp_path / "unit")
        await cache.store(
            compute_fingerprint(CODE),
            [Suggestion(title="Test addition of positives", reasons=["basic case"])],
        )
        create = AsyncMock(return_value=_anthropic_response(
            SimpleNamespace(type="text", text=GENERATED)
        ))

        result = await GenerationOrchestrator(
            _anthropic(create), cache, _select_first
        ).run(CODE)

        assert result.cache_hit is True
        assert create.await_count == 1
