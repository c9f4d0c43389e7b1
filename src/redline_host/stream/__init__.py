"""
Stream Module
=============

Framed message transport between the browser and the native host.

This module provides the protocol layer of redline_host:
    - encode_message / decode_messages: Length-prefixed JSON framing
    - ReceiveBuffer: Per-stream byte accumulator
    - StreamDispatcher: Request/response loop over stdin/stdout

Example:
    from redline_host.storage import FeedbackStore
    from redline_host.stream import StreamDispatcher

    dispatcher = StreamDispatcher(FeedbackStore())
    dispatcher.run(sys.stdin.buffer, sys.stdout.buffer)
"""

from redline_host.stream.codec import (
    MAX_MESSAGE_BYTES,
    DecodeResult,
    FrameEncodeError,
    decode_messages,
    encode_message,
)
from redline_host.stream.buffer import ReceiveBuffer
from redline_host.stream.dispatcher import DispatcherMetrics, StreamDispatcher


__all__ = [
    "MAX_MESSAGE_BYTES",
    "DecodeResult",
    "FrameEncodeError",
    "decode_messages",
    "encode_message",
    "ReceiveBuffer",
    "StreamDispatcher",
    "DispatcherMetrics",
]
