"""
jsonseq one-shot helpers - json-module style load/dump over JSON text sequences.

Usage:
    from jsonseq import codec

    data = codec.dumps([{"a": 1}, [1, 2]])        # b'\\x1e{"a":1}\\n\\x1e[1,2]\\n'
    values = codec.loads(data)                   # [{'a': 1}, [1, 2]]

    with open("out.json-seq", "wb") as f:
        codec.dump(events, f)
    with open("out.json-seq", "rb") as f:
        for value in codec.load(f):
            ...
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator

from jsonseq.reader import JsonSeqReader
from jsonseq.spec import MAX_IDENTIFY_SCAN_BYTES, looks_like_json_seq
from jsonseq.writer import JsonSeqWriter


def dump(values: Iterable[Any], fp: BinaryIO, **writer_kwargs: Any) -> int:
    """Write values to a binary file as a JSON text sequence.

    fp is borrowed and left open. Returns the number of records written.
    Calling dump() repeatedly on one file appends to the same sequence.
    """
    writer = JsonSeqWriter(fp, owns_stream=False, **writer_kwargs)
    return writer.write_values(values)


def dumps(values: Iterable[Any], **writer_kwargs: Any) -> bytes:
    """Encode values as a JSON text sequence."""
    buf = io.BytesIO()
    dump(values, buf, **writer_kwargs)
    return buf.getvalue()


def load(fp: BinaryIO, **reader_kwargs: Any) -> Iterator[Any]:
    """Lazily decode values from a binary file. fp is borrowed and left open."""
    yield from JsonSeqReader(fp, owns_stream=False, **reader_kwargs)


def loads(data: bytes | bytearray | memoryview | str) -> list[Any]:
    """Decode every value in a JSON text sequence."""
    if isinstance(data, str):
        reader = JsonSeqReader.from_str(data)
    else:
        reader = JsonSeqReader.from_bytes(data)
    with reader:
        return list(reader)


def is_json_seq(path: str | Path) -> bool:
    """Fast check if a file looks like a JSON text sequence. Reads only the first bytes."""
    with open(path, "rb") as f:
        head = f.read(MAX_IDENTIFY_SCAN_BYTES)
    return looks_like_json_seq(head)


def is_json_seq_bytes(data: bytes) -> bool:
    """Fast check if bytes look like a JSON text sequence."""
    return looks_like_json_seq(data)
