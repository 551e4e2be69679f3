"""
jsonseq - JSON text sequences (RFC 7464).
Streaming reader and writer for RS-delimited JSON records.
"""

__version__ = "0.1.0"

from jsonseq.spec import RS, LF, MEDIA_TYPE, EXTENSION, MAX_IDENTIFY_SCAN_BYTES
from jsonseq.errors import (
    JsonSeqError,
    RecordDecodeError,
    RecordTextError,
    RecordEncodeError,
    SeparatorInRecordError,
)
from jsonseq.reader import JsonSeqReader, EOS
from jsonseq.writer import JsonSeqWriter
from jsonseq.codec import dump, dumps, load, loads, is_json_seq, is_json_seq_bytes
