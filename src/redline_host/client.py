"""
Native Host Client
==================

The browser side of the save call, for scripts and tests.

Mirrors what the extension background script does with
chrome.runtime.sendNativeMessage: start the host, send one request
frame, read one response frame, stop the host.

Usage:
    redline-send screenshot.png --url http://localhost:3000
    redline-send screenshot.png --feedback-dir /tmp/feedback
"""

import argparse
import logging
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from redline_host.storage.data_url import build_png_data_url, looks_like_png
from redline_host.storage.paths import to_iso_string, utc_now
from redline_host.stream.codec import decode_messages, encode_message


logger = logging.getLogger(__name__)


INVALID_CAPTURE_MESSAGE = "Screenshot capture returned an invalid PNG payload."
HOST_FAILED_MESSAGE = "Native messaging host failed to save screenshot."


class HostClientError(Exception):
    """Raised when the native host cannot be reached or reports a failure."""
    pass


def default_host_command() -> List[str]:
    return [sys.executable, "-m", "redline_host.main"]


class NativeHostClient:
    """
    One-shot client for the native host process.

    Attributes:
        command: argv used to start the host
        timeout: Seconds to wait for the host to exit (None = no limit)

    Example:
        client = NativeHostClient()
        response = client.send({"action": "save", "dataUrl": data_url})
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.command = list(command) if command else default_host_command()
        self.timeout = timeout

    def send(self, message: Any) -> Dict[str, Any]:
        """
        Send one request and return the host's first response.

        Raises:
            HostClientError: If the host cannot be started, times out,
                or does not answer with one well-formed response frame
        """
        try:
            completed = subprocess.run(
                self.command,
                input=encode_message(message),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise HostClientError(f"Failed to run native host {self.command[0]}: {e}")

        if completed.stderr:
            logger.debug(completed.stderr.decode("utf-8", errors="replace").rstrip())

        result = decode_messages(completed.stdout)
        if result.failure is not None:
            raise HostClientError(f"Invalid response from native host: {result.failure.message}")
        if not result.messages:
            raise HostClientError(
                f"Native host exited with code {completed.returncode} without responding"
            )

        response = result.messages[0]
        if not isinstance(response, dict):
            raise HostClientError(f"Unexpected native host response: {response!r}")
        return response


def capture_and_save(
    data_url: Any,
    metadata: Optional[Dict[str, Any]] = None,
    tab_url: Optional[str] = None,
    client: Optional[NativeHostClient] = None,
) -> Dict[str, Any]:
    """
    Hand a captured screenshot to the native host.

    Args:
        data_url: PNG data URL of the screenshot
        metadata: Annotation metadata (url, timestamp, ...)
        tab_url: URL of the captured tab
        client: Host client to use (default: spawn redline_host.main)

    Returns:
        {"success": True, "path": <saved path>}

    Raises:
        HostClientError: If the payload is not a PNG data URL or the
            host reports a failure
    """
    if not isinstance(data_url, str) or not data_url.startswith("data:image/png"):
        raise HostClientError(INVALID_CAPTURE_MESSAGE)

    payload_metadata = {
        **(metadata or {}),
        "tabUrl": tab_url,
        "capturedAt": to_iso_string(utc_now()),
    }

    client = client or NativeHostClient()
    response = client.send({
        "action": "save",
        "dataUrl": data_url,
        "metadata": payload_metadata,
    })

    if not response.get("success"):
        raise HostClientError(response.get("error") or HOST_FAILED_MESSAGE)

    return {"success": True, "path": response.get("path")}


# =============================================================================
# Command Line
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redline-send",
        description="Send a PNG screenshot to the redline native host",
    )
    parser.add_argument("png", type=Path, help="PNG file to save")
    parser.add_argument("--url", default=None, help="Page URL to record")
    parser.add_argument("--timestamp", default=None, help="Capture timestamp (ISO-8601)")
    parser.add_argument(
        "--feedback-dir",
        default=None,
        help="Feedback directory passed to the default host (ignored with --host-command)",
    )
    parser.add_argument(
        "--host-command",
        default=None,
        help="Command used to start the host (default: this Python's redline_host.main)",
    )
    parser.add_argument("--timeout", type=float, default=30.0, help="Seconds to wait for the host")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    try:
        png_bytes = args.png.read_bytes()
    except OSError as e:
        print(f"error: cannot read {args.png}: {e}", file=sys.stderr)
        return 1

    if not looks_like_png(png_bytes):
        print(f"error: {args.png} is not a PNG file", file=sys.stderr)
        return 1

    if args.host_command:
        command = shlex.split(args.host_command)
        if args.feedback_dir:
            logger.warning("--feedback-dir is not forwarded to a custom --host-command")
    else:
        command = default_host_command()
        if args.feedback_dir:
            command += ["--feedback-dir", args.feedback_dir]

    metadata = {}
    if args.url:
        metadata["url"] = args.url
    if args.timestamp:
        metadata["timestamp"] = args.timestamp

    try:
        result = capture_and_save(
            build_png_data_url(png_bytes),
            metadata=metadata,
            client=NativeHostClient(command, timeout=args.timeout),
        )
    except HostClientError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(result["path"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
