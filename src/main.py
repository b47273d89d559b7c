# src/main.py - v2
"""CLI entry point.

Usage:
    unitgen [options] <file>

Suggests unit tests for <file>, lets you pick one, and prints the
generated test (or appends it to a file with --write).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from unitgen.config.settings import Settings
from unitgen.core.errors import UnitGenError
from unitgen.logging.logger import setup_logging
from unitgen.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CACHE_WRITE_FAILED = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        settings = _load_settings(args)
    except (UnitGenError, ValidationError) as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE

    setup_logging(
        "DEBUG" if args.verbose else settings.log_level,
        settings.log_format,
    )

    path: Path = args.file
    if not path.is_file():
        logger.error("File not found: %s", path)
        parser.print_usage(sys.stderr)
        return EXIT_FAILURE

    try:
        return asyncio.run(_run(path, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except UnitGenError as exc:
        logger.error("%s", exc, exc_info=args.verbose)
        return EXIT_FAILURE
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_FAILURE


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="unitgen",
        description=f"unitgen v{__version__} - LLM unit test suggestions and generation",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", "--debug", dest="verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument("file", type=Path, help="Source file to test")
    parser.add_argument(
        "--provider", dest="ai_provider", default=None,
        help="AI provider: openai or anthropic (default: openai)",
    )
    parser.add_argument(
        "--model", dest="ai_model", default=None,
        help="Model id (default depends on provider)",
    )
    parser.add_argument(
        "--secret-path", dest="ai_secret_path", type=Path, default=None,
        help="File holding the API key (default: ./secrets/<provider>_api_key)",
    )
    parser.add_argument(
        "--secret-env-var", dest="ai_secret_env_var", default=None,
        help="Env var holding the API key (default: <PROVIDER>_API_KEY)",
    )
    parser.add_argument(
        "--cache-dir", dest="cache_root", type=Path, default=None,
        help="Suggestion cache directory (default: /tmp/unit)",
    )
    parser.add_argument(
        "--timeout", dest="request_timeout_s", type=float, default=None,
        help="Timeout in seconds for each API call (default: 120)",
    )
    parser.add_argument(
        "--no-color", dest="color", action="store_false", default=None,
        help="Disable colored output",
    )
    parser.add_argument(
        "-w", "--write", action="store_true", default=None,
        help="Append the test to a file instead of printing it",
    )
    parser.add_argument(
        "-o", "--output", dest="output_path", type=Path, default=None,
        help="File for --write (default: unit_test<ext> next to the source)",
    )
    parser.add_argument(
        "--log-format", choices=["json", "text"], default=None,
        help="Log format on stderr (default: text)",
    )
    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    """Settings from env/.env with CLI flags applied on top."""
    from unitgen.config.settings import load_settings

    return load_settings(
        ai_provider=args.ai_provider,
        ai_model=args.ai_model,
        ai_secret_path=args.ai_secret_path,
        ai_secret_env_var=args.ai_secret_env_var,
        cache_root=args.cache_root,
        request_timeout_s=args.request_timeout_s,
        color=args.color,
        write=args.write,
        output_path=args.output_path,
        log_format=args.log_format,
    )


async def _run(path: Path, settings: Settings) -> int:
    """Wire the collaborators for one invocation and run it."""
    from unitgen.cache.json_store import JsonSuggestionCache
    from unitgen.config.secrets import resolve_api_key
    from unitgen.llm.client_factory import create_provider
    from unitgen.pipeline.orchestrator import GenerationOrchestrator
    from unitgen.pipeline.output import create_sink
    from unitgen.pipeline.prompts import detect_language
    from unitgen.pipeline.selection import TerminalSelector, make_console

    try:
        content = path.read_bytes()
    except OSError as exc:
        logger.error("Failed to read file: %s", exc)
        return EXIT_FAILURE

    api_key = resolve_api_key(settings)
    provider = create_provider(settings.ai_provider, api_key, settings)
    cache = JsonSuggestionCache(settings.cache_root)

    orchestrator = GenerationOrchestrator(
        provider=provider,
        cache=cache,
        selector=TerminalSelector(make_console(settings.color)),
        sink=create_sink(settings, path),
        language=detect_language(path),
    )
    result = await orchestrator.run(content)

    if result.cache_write_error:
        return EXIT_CACHE_WRITE_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
