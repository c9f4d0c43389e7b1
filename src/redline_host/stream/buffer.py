"""
Receive Buffer
==============

Byte accumulator between stdin chunks and the frame codec.

Design Rules:
    - Owned by exactly one dispatcher, never shared or module-level
    - After each decode pass it holds nothing or a frame prefix
    - Reset discards everything (no resynchronization)
"""

import logging

from redline_host.stream.codec import MAX_MESSAGE_BYTES, DecodeResult, decode_messages


logger = logging.getLogger(__name__)


class ReceiveBuffer:
    """
    Growing byte buffer fed by stream chunks.

    Example:
        buffer = ReceiveBuffer()
        result = buffer.append_and_decode(chunk)
        for message in result.messages:
            handle(message)
    """

    def __init__(self, max_message_bytes: int = MAX_MESSAGE_BYTES) -> None:
        self._data = b""
        self._max_message_bytes = max_message_bytes

    def __len__(self) -> int:
        return len(self._data)

    @property
    def pending(self) -> bytes:
        """Bytes held back for the next chunk."""
        return self._data

    def append_and_decode(self, chunk: bytes) -> DecodeResult:
        """
        Append a chunk and decode every complete frame.

        On success the buffer keeps only the undecoded tail. On failure
        the buffer is reset and the failure is returned to the caller.
        """
        self._data += chunk
        result = decode_messages(self._data, max_message_bytes=self._max_message_bytes)

        if not result.ok:
            discarded = self.reset()
            logger.debug(f"Discarded {discarded} buffered bytes after protocol error")
            return result

        self._data = result.remaining
        return result

    def reset(self) -> int:
        """
        Drop all buffered bytes.

        Returns:
            Number of bytes discarded.
        """
        discarded = len(self._data)
        self._data = b""
        return discarded
