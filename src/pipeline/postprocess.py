# src/pipeline/postprocess.py - v2
"""Fenced code block unwrapping for generated artifacts.

Providers return raw model text; some models wrap code in a ```lang fence.
Unwrapping happens once, here, on the orchestrator side.
"""

from __future__ import annotations

FENCE = "```"


def remove_first_line(text: str) -> str:
    """Everything after the first newline; empty for single-line input."""
    parts = text.split("\n", 1)
    if len(parts) < 2:
        return ""
    return parts[1]


def remove_line_and_after(text: str, marker: str = FENCE) -> str:
    """Lines before the first line equal to marker; text unchanged if absent.

    Indentation and trailing whitespace around the marker, a carriage
    return included, are ignored.
    """
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if line.strip() == marker:
            return "\n".join(lines[:i])
    return text


def extract_fenced_block(text: str) -> str:
    """Body of a fenced block starting on the first line of text.

    The opening fence line (with any language tag) is dropped along with
    the closing fence and everything after it. Without a closing fence the
    body runs to the end of the text.
    """
    return remove_line_and_after(remove_first_line(text), FENCE)


def unwrap_artifact(text: str) -> str:
    """Unwrap the first fenced block in text, if there is one.

    Any preamble before the opening fence is discarded and CRLF line
    endings in the block become LF. Text without a fence line is returned
    unchanged.
    """
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if line.lstrip().startswith(FENCE):
            block = "\n".join(lines[i:]).replace("\r\n", "\n")
            return extract_fenced_block(block)
    return text
