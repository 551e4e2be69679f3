"""
jsonseq errors.

I/O failures are not wrapped: whatever OSError the underlying stream raises
reaches the caller unchanged. Everything below is raised by the codec itself
and also subclasses ValueError, so callers catching ValueError keep working.
"""

from __future__ import annotations


class JsonSeqError(Exception):
    """Base exception for all codec errors raised by this package."""


class RecordDecodeError(JsonSeqError, ValueError):
    """A record's bytes are not a valid JSON text.

    The record has already been consumed from the stream; reading can
    continue with the next one.
    """

    def __init__(self, record: bytes, reason: str) -> None:
        super().__init__(f"Invalid JSON text in record ({len(record)} bytes): {reason}")
        self.record = record
        self.reason = reason


class RecordTextError(JsonSeqError, ValueError):
    """A record's bytes are not valid UTF-8 when read as text."""

    def __init__(self, record: bytes, reason: str) -> None:
        super().__init__(f"Record is not valid UTF-8 ({len(record)} bytes): {reason}")
        self.record = record
        self.reason = reason


class RecordEncodeError(JsonSeqError, ValueError):
    """A value could not be serialized as a JSON text."""


class SeparatorInRecordError(JsonSeqError, ValueError):
    """Raw record content contains the RS byte (0x1E).

    Raised before anything is written, so the stream is never left with
    a forged record boundary.
    """

    def __init__(self, record: bytes) -> None:
        position = bytes(record).find(b"\x1e")
        super().__init__(
            f"Record content contains the record separator 0x1E at offset {position}"
        )
        self.record = record
        self.position = position
