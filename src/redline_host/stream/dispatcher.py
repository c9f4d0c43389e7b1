"""
Stream Dispatcher
=================

Reads framed requests from a byte stream and writes framed responses.

This module provides the StreamDispatcher class which:
    - Owns a ReceiveBuffer for one input stream
    - Decodes every complete frame after each chunk
    - Hands each request to the FeedbackStore, in order
    - Emits exactly one response frame per request
    - Emits one error frame and resets on protocol corruption

Design Rules:
    - Single-threaded and strictly sequential
    - A failed save never stops the rest of the batch
    - End of input is a clean shutdown, a partial tail is not an error
"""

import logging
from typing import BinaryIO, List

from redline_host.models.error_kinds import ErrorKind, Failure
from redline_host.storage.store import FeedbackStore
from redline_host.stream.buffer import ReceiveBuffer
from redline_host.stream.codec import MAX_MESSAGE_BYTES, encode_message


logger = logging.getLogger(__name__)


class DispatcherMetrics:
    """Metrics for StreamDispatcher observability."""

    __slots__ = (
        "chunks_received",
        "bytes_received",
        "messages_decoded",
        "saves_succeeded",
        "saves_failed",
        "protocol_errors",
    )

    def __init__(self) -> None:
        self.chunks_received: int = 0
        self.bytes_received: int = 0
        self.messages_decoded: int = 0
        self.saves_succeeded: int = 0
        self.saves_failed: int = 0
        self.protocol_errors: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "chunks_received": self.chunks_received,
            "bytes_received": self.bytes_received,
            "messages_decoded": self.messages_decoded,
            "saves_succeeded": self.saves_succeeded,
            "saves_failed": self.saves_failed,
            "protocol_errors": self.protocol_errors,
        }


class StreamDispatcher:
    """
    Request/response loop over one byte stream.

    Attributes:
        store: FeedbackStore that handles each request
        buffer: ReceiveBuffer owned by this dispatcher
        metrics: Operational metrics

    Example:
        dispatcher = StreamDispatcher(FeedbackStore())
        dispatcher.run(sys.stdin.buffer, sys.stdout.buffer)
    """

    def __init__(
        self,
        store: FeedbackStore,
        max_message_bytes: int = MAX_MESSAGE_BYTES,
        read_chunk_size: int = 64 * 1024,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            store: Store that persists decoded requests
            max_message_bytes: Largest accepted frame payload
            read_chunk_size: Bytes requested per read in run()
        """
        if read_chunk_size < 1:
            raise ValueError("read_chunk_size must be >= 1")

        self.store = store
        self.buffer = ReceiveBuffer(max_message_bytes=max_message_bytes)
        self.read_chunk_size = read_chunk_size
        self.metrics = DispatcherMetrics()

    def feed(self, chunk: bytes) -> List[bytes]:
        """
        Process one chunk of input.

        Args:
            chunk: Bytes as they arrived on the stream

        Returns:
            Encoded response frames, one per decoded request, or a single
            error frame if the buffer turned out to be corrupt.
        """
        self.metrics.chunks_received += 1
        self.metrics.bytes_received += len(chunk)

        result = self.buffer.append_and_decode(chunk)
        if result.failure is not None:
            return [self._protocol_error(result.failure)]

        self.metrics.messages_decoded += len(result.messages)
        logger.debug(
            f"Decoded {len(result.messages)} message(s), "
            f"{len(self.buffer)} byte(s) pending"
        )

        responses = []
        for message in result.messages:
            save_result = self.store.save(message)
            if save_result.success:
                self.metrics.saves_succeeded += 1
            else:
                self.metrics.saves_failed += 1
            responses.append(encode_message(save_result.to_response()))
        return responses

    def run(self, input_stream: BinaryIO, output_stream: BinaryIO) -> None:
        """
        Consume the input stream until end of input.

        Each response is written and flushed as soon as it is produced.
        """
        logger.info("Native host listening for framed requests")

        while True:
            chunk = self._read_chunk(input_stream)
            if not chunk:
                break

            for response in self.feed(chunk):
                output_stream.write(response)
                output_stream.flush()

        if len(self.buffer):
            logger.debug(f"End of input with {len(self.buffer)} unframed byte(s) pending")
        logger.info(f"Native host input closed: {self.metrics.to_dict()}")

    def _read_chunk(self, input_stream: BinaryIO) -> bytes:
        read1 = getattr(input_stream, "read1", None)
        if read1 is not None:
            return read1(self.read_chunk_size)
        return input_stream.read(self.read_chunk_size)

    def _protocol_error(self, failure: Failure) -> bytes:
        self.metrics.protocol_errors += 1
        if failure.kind == ErrorKind.INVALID_LENGTH:
            logger.error(f"Corrupt frame header, discarding buffered input: {failure.message}")
        else:
            logger.error(f"Undecodable frame payload, discarding buffered input: {failure.message}")
        return encode_message(failure.to_response())
