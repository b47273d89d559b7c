# src/pipeline/prompts.py - v1
"""Prompt templates for the suggestion and generation phases."""

from __future__ import annotations

from pathlib import Path

from unitgen.core.models import Suggestion

SUGGESTION_SYSTEM_PROMPT = (
    "You are a seasoned engineer that generates unit test suggestions "
    "for the provided code."
)

ARTIFACT_SYSTEM_PROMPT = """\
You are a seasoned engineer who writes amazing unit tests.

First write your unit test.

Second review your code:
- Validate that it is efficient and effective.
- Validate your imports -- they must be real.
- Validate your functions -- they must be real.
- Validate your code -- it must be correct.

Third, you take time to optimize your test.

Finally return your unit test. Do not explain.
"""

_LANGUAGES: dict[str, str] = {
    ".go": "Go",
    ".py": "Python",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".java": "Java",
    ".kt": "Kotlin",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cc": "C++",
    ".cpp": "C++",
    ".hpp": "C++",
    ".swift": "Swift",
    ".scala": "Scala",
}


def detect_language(path: Path) -> str | None:
    """Language name from the file extension, None when unknown."""
    return _LANGUAGES.get(path.suffix.lower())


def decode_content(content: bytes) -> str:
    """Source bytes as text for prompt embedding."""
    return content.decode("utf-8", errors="replace")


def build_suggestion_prompt(content: bytes, language: str | None = None) -> str:
    subject = f"{language} code" if language else "code"
    return (
        f"Analyze the following {subject} and list possible unit tests "
        f"that could be generated:\n\n{decode_content(content)}"
    )


def build_artifact_prompt(content: bytes, suggestion: Suggestion) -> str:
    prompt = (
        "Write a unit test for the following code:\n"
        f"### CODE\n{decode_content(content)}\n\n"
        f"### UNIT TEST\n: {suggestion.title}"
    )
    for reason in suggestion.reasons:
        prompt += f"\n- {reason}"
    return prompt
