"""
jsonseq Reader - Streaming parser for JSON text sequences.

Streaming features:
  - One record per read: nothing beyond the current record is decoded
  - Read-ahead buffer of buffer_size bytes, scanned for the RS byte
  - Works on any binary stream with read(n): files, pipes, sockets, BytesIO

Tolerance features:
  - Leading and repeated RS bytes never produce empty records
  - A final record with no trailing RS (EOF mid-record) is still returned
  - Invalid records raise per-record errors; the reader stays usable
"""

from __future__ import annotations

import io
import json
import logging
from typing import Any, BinaryIO, Iterator

from jsonseq.errors import RecordDecodeError, RecordTextError
from jsonseq.spec import RS, RS_BYTE, DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)


class _EndOfSequence:
    """Sentinel returned by JsonSeqReader.read_value() once the stream is exhausted."""

    def __repr__(self) -> str:
        return "EOS"

    def __bool__(self) -> bool:
        return False


# JSON null decodes to None, so end-of-sequence needs its own marker
EOS = _EndOfSequence()


class JsonSeqReader:
    """
    Streaming JSON text sequence reader.

    Usage:
        # Iterate decoded values
        with JsonSeqReader(open("events.json-seq", "rb")) as reader:
            for value in reader:
                handle(value)

        # Pull one record at a time
        reader = JsonSeqReader.from_bytes(b"\\x1e{}\\n\\x1e[1]\\n")
        while (value := reader.read_value()) is not EOS:
            handle(value)

        # Borrow a stream without closing it
        reader = JsonSeqReader(sock_file, owns_stream=False)
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        owns_stream: bool = True,
    ) -> None:
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._stream: BinaryIO | None = stream
        self._buffer_size = buffer_size
        self._owns_stream = owns_stream
        self._buffer = b""
        self._pos = 0
        self._closed = False

    @classmethod
    def from_str(cls, text: str, **kwargs: Any) -> JsonSeqReader:
        """Read a sequence held in a string (UTF-8 encoded first)."""
        return cls(io.BytesIO(text.encode("utf-8")), **kwargs)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview, **kwargs: Any) -> JsonSeqReader:
        """Read a sequence held in memory. The data is copied."""
        return cls(io.BytesIO(bytes(data)), **kwargs)

    # --- Core -------------------------------------------------------------

    def _fill(self) -> bool:
        """Refill the read-ahead buffer. Returns False at end of stream."""
        chunk = self._checked_stream().read(self._buffer_size)
        if not chunk:
            return False
        self._buffer = bytes(chunk)
        self._pos = 0
        return True

    def _read_until_separator(self) -> bytes:
        """Read up to and including the next RS byte, or to end of stream.

        Returns b"" only when the stream is exhausted.
        """
        parts: list[bytes] = []
        while True:
            if self._pos >= len(self._buffer) and not self._fill():
                return b"".join(parts)
            end = self._buffer.find(RS, self._pos)
            if end >= 0:
                parts.append(self._buffer[self._pos:end + 1])
                self._pos = end + 1
                return b"".join(parts)
            parts.append(self._buffer[self._pos:])
            self._pos = len(self._buffer)

    def read_record_raw(self) -> bytes | None:
        """Read the next record's raw bytes, without the RS framing.

        Returns None once the sequence has ended, and on every call after.
        Any trailing LF is kept: it belongs to the record content.
        """
        self._checked_stream()
        while True:
            segment = self._read_until_separator()
            if not segment:
                logger.debug("End of sequence")
                return None
            if segment == RS_BYTE:
                # Empty segment: leading RS or a run of RS bytes
                logger.debug("Skipped empty segment")
                continue
            if segment[-1] == RS:
                return segment[:-1]
            # EOF before the next RS: the unterminated record is still valid
            return segment

    def read_record_text(self) -> str | None:
        """Read the next record decoded as UTF-8 text."""
        record = self.read_record_raw()
        if record is None:
            return None
        try:
            return record.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RecordTextError(record, str(e)) from e

    def read_value(self) -> Any:
        """Read and decode the next record as a JSON value.

        Returns EOS once the sequence has ended. Raises RecordDecodeError
        when the record is not valid JSON; the record is consumed either way.
        """
        record = self.read_record_raw()
        if record is None:
            return EOS
        return _decode_record(record)

    # --- Lazy views -------------------------------------------------------

    def iter_bytes(self) -> Iterator[bytes]:
        """Yield raw records until the sequence ends."""
        while (record := self.read_record_raw()) is not None:
            yield record

    def iter_text(self) -> Iterator[str]:
        """Yield records as text until the sequence ends."""
        while (text := self.read_record_text()) is not None:
            yield text

    def __iter__(self) -> JsonSeqReader:
        return self

    def __next__(self) -> Any:
        value = self.read_value()
        if value is EOS:
            raise StopIteration
        return value

    # --- Stream access ----------------------------------------------------

    def _checked_stream(self) -> BinaryIO:
        if self._stream is None:
            raise ValueError("raw stream has been detached")
        if self._closed:
            raise ValueError("I/O operation on closed JsonSeqReader")
        return self._stream

    @property
    def stream(self) -> BinaryIO:
        """The wrapped stream. Still owned by the reader."""
        if self._stream is None:
            raise ValueError("raw stream has been detached")
        return self._stream

    def detach(self) -> BinaryIO:
        """Hand the wrapped stream back to the caller.

        The reader is unusable afterwards. Bytes already pulled into the
        read-ahead buffer are dropped.
        """
        stream = self.stream
        self._stream = None
        self._buffer = b""
        self._pos = 0
        return stream

    def close(self) -> None:
        """Close the reader, and the stream too if the reader owns it."""
        if self._closed:
            return
        self._closed = True
        if self._owns_stream and self._stream is not None:
            self._stream.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> JsonSeqReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _decode_record(record: bytes) -> Any:
    """Decode one record's bytes as a JSON value."""
    try:
        return json.loads(record.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise RecordDecodeError(record, f"not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise RecordDecodeError(record, str(e)) from e
