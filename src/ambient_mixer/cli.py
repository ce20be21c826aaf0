"""Command-line interface for the ambient mixer."""

from __future__ import annotations

import argparse
import sys
import logging
import threading
from typing import Callable, Iterable, Optional, Tuple
from types import TracebackType

from ambient_mixer.config import load_config
from ambient_mixer.discovery import discover_sources
from ambient_mixer.errors import NoMediaFound
from ambient_mixer.hangwatch import enable_faulthandler, dump_threads
from ambient_mixer.logging_setup import init_logging
from ambient_mixer.mixer import MixerState, load_mixer
from ambient_mixer.playback_vlc import VlcOutput

logger = logging.getLogger(__name__)


def _int_at_least(minimum: int) -> Callable[[str], int]:
    def convert(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
        if value < minimum:
            raise argparse.ArgumentTypeError(f"must be >= {minimum}, got {value}")
        return value

    return convert


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ambient-mixer", description="Ambient sound mixer"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Sound files or folders to load (default: configured sound dirs)",
    )
    parser.add_argument(
        "-g",
        "--granularity",
        type=_int_at_least(1),
        default=None,
        help="Number of volume steps per channel (default: 25)",
    )
    parser.add_argument(
        "-s",
        "--start-volume",
        type=_int_at_least(0),
        default=None,
        help="Initial volume step for every channel (default: 0)",
    )
    return parser


def _run_tui(mixer: MixerState) -> int:
    try:
        from ambient_mixer.tui import run_tui
    except (ImportError, RuntimeError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(mixer)


def _install_exception_hooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[
            type[BaseException], BaseException, Optional[TracebackType]
        ] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)
        dump_threads(f"thread exception in {thread_name}")

    threading.excepthook = thread_hook


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    log_path = init_logging()
    enable_faulthandler(log_path)
    _install_exception_hooks()
    logger.info("App start")

    config = load_config()
    roots = args.paths or list(config.sound_dirs)
    granularity = (
        args.granularity if args.granularity is not None else config.granularity
    )
    start_volume = (
        args.start_volume if args.start_volume is not None else config.start_volume
    )

    sources = discover_sources(roots)
    if not sources:
        print(f"{NoMediaFound()} in {', '.join(map(str, roots))}", file=sys.stderr)
        logger.error("No media found in %s", roots)
        return 1

    try:
        output = VlcOutput()
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        mixer = load_mixer(
            sources, output, granularity=granularity, start_volume=start_volume
        )
    except NoMediaFound as exc:
        print(str(exc), file=sys.stderr)
        logger.error("No source could be loaded from %s", roots)
        return 1

    exit_code = _run_tui(mixer)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
