# src/pipeline/output.py - v2
"""Output sinks for the generated test."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Protocol, TextIO

from unitgen.config.settings import Settings

logger = logging.getLogger(__name__)


class ArtifactSink(Protocol):
    """Receives the final generated artifact."""

    def emit(self, artifact: str) -> None: ...


class StdoutSink:
    """Print the artifact."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, artifact: str) -> None:
        print(artifact, file=self._stream or sys.stdout)


class FileSink:
    """Append the artifact to a file, creating it (and parents) if needed.

    If the file cannot be written the artifact goes to stdout instead, so
    the generated test is never lost.
    """

    def __init__(self, path: Path, fallback: StdoutSink | None = None) -> None:
        self.path = path
        self._fallback = fallback or StdoutSink()

    def emit(self, artifact: str) -> None:
        text = artifact if artifact.endswith("\n") else artifact + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as e:
            logger.error("Failed to write file %s: %s", self.path, e)
            self._fallback.emit(artifact)
            return
        print(f"Test case written to file: {self.path}", file=sys.stderr)


def default_output_path(source: Path) -> Path:
    """unit_test<suffix> next to the source file."""
    return source.parent / f"unit_test{source.suffix}"


def create_sink(settings: Settings, source: Path) -> ArtifactSink:
    """Sink selected by settings.write / settings.output_path."""
    if not settings.write:
        return StdoutSink()
    return FileSink(settings.output_path or default_output_path(source))
