"""
jsonseq Writer - Frames records onto a binary stream.

Each record is written as three writes, each retried until complete:
  1. RS (0x1E)
  2. The content bytes, verbatim
  3. LF (0x0A)

There is no rollback: if the stream fails part way, the bytes already
written stay written and the caller decides what to do with the stream.
Flushing and durability belong to the wrapped stream.
"""

from __future__ import annotations

import errno
import json
import logging
from typing import Any, BinaryIO, Iterable

from jsonseq.errors import RecordEncodeError, SeparatorInRecordError
from jsonseq.spec import RS_BYTE, LF_BYTE, contains_separator

logger = logging.getLogger(__name__)


class JsonSeqWriter:
    """
    Streaming JSON text sequence writer.

    Usage:
        with JsonSeqWriter(open("events.json-seq", "wb")) as w:
            w.write_value({"event": "start"})
            w.write_value([1, 2, "c"])

        # Borrow a stream without closing it
        buf = io.BytesIO()
        JsonSeqWriter(buf, owns_stream=False).write_record_raw(b"hello")
        assert buf.getvalue() == b"\\x1ehello\\n"
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        owns_stream: bool = True,
        ensure_ascii: bool = False,
        sort_keys: bool = False,
    ) -> None:
        self._stream: BinaryIO | None = stream
        self._owns_stream = owns_stream
        self.ensure_ascii = ensure_ascii
        self.sort_keys = sort_keys
        self._records_written = 0
        self._closed = False

    def write_record_raw(self, data: bytes | bytearray | memoryview) -> None:
        """Write one record from pre-encoded bytes.

        Raises SeparatorInRecordError, before writing anything, if data
        contains RS. OSError from the stream propagates as-is.
        """
        stream = self._checked_stream()
        if contains_separator(data):
            raise SeparatorInRecordError(bytes(data))
        _write_all(stream, RS_BYTE)
        _write_all(stream, data)
        _write_all(stream, LF_BYTE)
        self._records_written += 1
        logger.debug("Wrote record %d (%d bytes)", self._records_written, len(data))

    def encode(self, value: Any) -> bytes:
        """Serialize a value to its compact JSON encoding."""
        try:
            return json.dumps(
                value,
                separators=(",", ":"),
                ensure_ascii=self.ensure_ascii,
                sort_keys=self.sort_keys,
                allow_nan=False,
            ).encode("utf-8")
        except (TypeError, ValueError, RecursionError) as e:
            raise RecordEncodeError(f"Value is not JSON-serializable: {e}") from e

    def write_value(self, value: Any) -> None:
        """Serialize a value as compact JSON and write it as one record."""
        self._checked_stream()
        self.write_record_raw(self.encode(value))

    def write_values(self, values: Iterable[Any]) -> int:
        """Write each value in order. Returns the number of records written."""
        count = 0
        for value in values:
            self.write_value(value)
            count += 1
        return count

    @property
    def records_written(self) -> int:
        return self._records_written

    # --- Stream access ----------------------------------------------------

    def _checked_stream(self) -> BinaryIO:
        if self._stream is None:
            raise ValueError("raw stream has been detached")
        if self._closed:
            raise ValueError("I/O operation on closed JsonSeqWriter")
        return self._stream

    @property
    def stream(self) -> BinaryIO:
        """The wrapped stream. Still owned by the writer."""
        if self._stream is None:
            raise ValueError("raw stream has been detached")
        return self._stream

    def detach(self) -> BinaryIO:
        """Hand the wrapped stream back to the caller. The writer is unusable afterwards."""
        stream = self.stream
        self._stream = None
        return stream

    def close(self) -> None:
        """Close the writer, and the stream too if the writer owns it."""
        if self._closed:
            return
        self._closed = True
        if self._owns_stream and self._stream is not None:
            self._stream.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> JsonSeqWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _write_all(stream: BinaryIO, data: bytes | bytearray | memoryview) -> None:
    """Write every byte of data, looping over short writes.

    A raw stream may accept fewer bytes than offered, or None when it would
    block; the latter raises BlockingIOError with the count written so far.
    """
    view = memoryview(data).cast("B")
    written = 0
    while written < len(view):
        n = stream.write(view[written:])
        if n is None:
            raise BlockingIOError(errno.EAGAIN, "write could not complete without blocking", written)
        written += n
