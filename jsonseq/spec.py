"""
JSON Text Sequence Format (RFC 7464)
====================================

Layout:
    <RS>{"id": 1}<LF>            <- Record: separator, one JSON text, line feed
    <RS>[1, 2, "c"]<LF>
    <RS>"hello"<LF>
    ...

Grammar:
    sequence    := record*
    record      := 0x1E content 0x0A
    content     := any byte sequence not containing 0x1E

Design Decisions:
    - 0x1E (ASCII Record Separator) marks the START of every record
    - 0x0A after each record is conventional only; readers never need it
    - RS can never appear inside a JSON text (control chars are escaped as \\u001e)
    - Record boundaries depend on RS alone: an LF inside content is content

Reader Tolerance:
    - Stray RS bytes before the first record are ignored
    - Runs of consecutive RS bytes collapse to one boundary (no empty records)
    - A final record with no trailing LF is returned intact
    - A final record with no RS after it (EOF mid-record) is still a record

Writer Contract:
    - Raw content handed to the writer must not contain RS
    - Each record is written as three writes (RS, content, LF), no rollback
"""

from __future__ import annotations

import io

# Record separator - starts every record
RS = 0x1E
RS_BYTE = b"\x1e"

# Record terminator - ends every record on write
LF = 0x0A
LF_BYTE = b"\n"

# IANA media type and conventional file extension
MEDIA_TYPE = "application/json-seq"
EXTENSION = ".json-seq"

# Bytes pulled from the underlying stream per read
DEFAULT_BUFFER_SIZE = io.DEFAULT_BUFFER_SIZE

# Max bytes sniffed for fast identification
MAX_IDENTIFY_SCAN_BYTES = 64

# Insignificant whitespace allowed before the first RS when sniffing
_LEADING_WHITESPACE = b" \t\r\n"


def contains_separator(data: bytes | bytearray | memoryview) -> bool:
    """Return True if data holds an RS byte anywhere."""
    if isinstance(data, memoryview):
        data = data.tobytes()
    return RS_BYTE in data


def looks_like_json_seq(head: bytes) -> bool:
    """Check whether the first significant byte of head is RS.

    Only the first MAX_IDENTIFY_SCAN_BYTES bytes are considered.
    """
    head = head[:MAX_IDENTIFY_SCAN_BYTES].lstrip(_LEADING_WHITESPACE)
    return head[:1] == RS_BYTE
