"""Command line entry point for rss_monitor."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional

from .config import MonitorConfig, load_config
from .monitor import Monitor

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Log to the console and, if given, to `log_file`."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def ensure_directories(config: MonitorConfig) -> None:
    config.data_dir.mkdir(parents=True, exist_ok=True)
    config.feeds_dir.mkdir(parents=True, exist_ok=True)


def install_signal_handlers(stop_event: threading.Event) -> None:
    def shutdown(signum, frame):
        logger.info("Gracefully shutting down...")
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rss-monitor",
        description="Turn a news listing page into an RSS feed",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=["run", "once", "serve"],
        help="run: monitor loop only; once: a single cycle; serve: HTTP server plus monitor loop",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.env_file)
    setup_logging(config.log_level, config.log_file)
    ensure_directories(config)

    if args.command == "serve":
        from .server import serve

        serve(config)
        return 0

    monitor = Monitor(config)
    if args.command == "once":
        result = monitor.run_once()
        logger.info(
            "Cycle finished: %d fetched, %d new, %d total",
            result.fetched, result.added, result.total,
        )
        return 0 if result.ok else 1

    stop_event = threading.Event()
    install_signal_handlers(stop_event)
    monitor.run_forever(stop_event=stop_event)
    return 0


if __name__ == "__main__":
    sys.exit(main())
