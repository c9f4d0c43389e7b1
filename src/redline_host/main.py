"""
Redline Native Host
===================

Entry point launched by the browser for native messaging.

The browser starts this process, writes framed save requests to its
stdin, and reads one framed response per request from its stdout.
The process exits cleanly when stdin closes.

Usage:
    redline-host
    redline-host --feedback-dir ~/screenshots --log-level DEBUG
    python -m redline_host.main --config /etc/redline/config.yaml
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from redline_host.config import load_config, setup_logging
from redline_host.storage import FeedbackStore
from redline_host.stream import StreamDispatcher


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redline-host",
        description="Native messaging host that saves annotated screenshots",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: $REDLINE_CONFIG or ./config.yaml)",
    )
    parser.add_argument(
        "--feedback-dir",
        default=None,
        help="Directory for screenshots and latest.json "
             "(default: $REDLINE_FEEDBACK_DIR or ~/.claude/feedback)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level",
    )
    # Chrome passes the calling extension origin (and a window handle on
    # Windows) as positional arguments.
    parser.add_argument("origin", nargs="*", help=argparse.SUPPRESS)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_config(args.config)
    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging(settings)

    if args.origin:
        logger.info(f"Started by {args.origin[0]}")

    store = FeedbackStore(args.feedback_dir or settings.storage.feedback_dir)
    dispatcher = StreamDispatcher(
        store,
        max_message_bytes=settings.protocol.max_message_bytes,
        read_chunk_size=settings.protocol.read_chunk_size,
    )

    try:
        dispatcher.run(sys.stdin.buffer, sys.stdout.buffer)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except BrokenPipeError:
        logger.warning("Browser closed the response pipe, shutting down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
