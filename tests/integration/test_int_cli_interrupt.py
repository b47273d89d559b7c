# tests/integration/test_int_cli_interrupt.py - v1
"""Integration: Ctrl-C at the selection prompt ends the CLI process.

Runs the real entry point in a subprocess against a pre-populated cache
(no network), waits for the suggestion menu, sends SIGINT while the
terminal read is pending and expects exit status 130.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import threading
import time
from pathlib import Path

import pytest

from unitgen.cache.fingerprint import compute_fingerprint
from unitgen.cache.json_store import JsonSuggestionCache
from unitgen.main import EXIT_INTERRUPTED

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="SIGINT delivery to a child needs POSIX"
)


def _drain(stream, sink: bytearray) -> None:
    for chunk in iter(lambda: os.read(stream.fileno(), 4096), b""):
        sink.extend(chunk)


@pytest.mark.asyncio
async def test_sigint_at_selection_prompt(
    tmp_path: Path, sample_content: bytes, sample_suggestions
):
    source = tmp_path / "add.go"
    source.write_bytes(sample_content)
    cache_dir = tmp_path / "cache"
    await JsonSuggestionCache(cache_dir).store(
        compute_fingerprint(sample_content), sample_suggestions
    )

    env = {k: v for k, v in os.environ.items() if not k.startswith("UNITGEN_")}
    env["OPENAI_API_KEY"] = "sk-test"
    proc = subprocess.Popen(
        [sys.executable, "-m", "unitgen.main", "--cache-dir", str(cache_dir), str(source)],
        cwd=tmp_path,
        env=env,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    err = bytearray()
    reader = threading.Thread(target=_drain, args=(proc.stderr, err), daemon=True)
    reader.start()
    try:
        deadline = time.monotonic() + 15
        while b"Select unit test:" not in err:
            assert proc.poll() is None, f"exited early: {bytes(err).decode()}"
            assert time.monotonic() < deadline, "selection prompt never shown"
            time.sleep(0.05)
        time.sleep(0.3)

        proc.send_signal(signal.SIGINT)
        code = proc.wait(timeout=15)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        proc.stdin.close()

    assert code == EXIT_INTERRUPTED
    assert proc.stdout.read() == b""
