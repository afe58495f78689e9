"""CLI entry point for toolcall-demos.

This module provides the command-line interface for running the demos.
It can be invoked as `toolcall-demos` (via the script entry point) or
`python -m toolcall_demos`.
"""

import argparse
import asyncio
import logging
import sys

from toolcall_demos import __version__
from toolcall_demos.config import ToolcallSettings
from toolcall_demos.demos import DEFAULT_DEMO, DEMOS
from toolcall_demos.security import PolicyViolation

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolcall-demos",
        description="Console demos of LLM chat and tool calling via Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"toolcall-demos {__version__}",
    )

    parser.add_argument(
        "demo",
        nargs="?",
        default=DEFAULT_DEMO,
        choices=sorted(DEMOS),
        help=f"Demo to run (default: {DEFAULT_DEMO})",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available demos and exit",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Chat model (default: llama3.1:8b, can be set via TOOLCALL_MODEL_NAME)",
    )

    parser.add_argument(
        "--image-model",
        type=str,
        default=None,
        help="Image model (default: dall-e-3, can be set via TOOLCALL_IMAGE_MODEL_NAME)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via TOOLCALL_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via TOOLCALL_LOG_LEVEL)",
    )

    return parser


def settings_from_args(args: argparse.Namespace) -> ToolcallSettings:
    """Build settings; CLI args override environment variables."""
    settings_kwargs = {}
    if args.model is not None:
        settings_kwargs["model_name"] = args.model
    if args.image_model is not None:
        settings_kwargs["image_model_name"] = args.image_model
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    return ToolcallSettings(**settings_kwargs)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the toolcall-demos CLI.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)

    if args.list:
        for name in sorted(DEMOS):
            doc = (DEMOS[name].__doc__ or "").strip().splitlines()
            print(f"{name:20} {doc[0] if doc else ''}")
        return 0

    settings = settings_from_args(args)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

    try:
        asyncio.run(DEMOS[args.demo](settings))
    except PolicyViolation as e:
        logging.getLogger(__name__).error(f"Stopped by security policy: {e.reason}")
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
