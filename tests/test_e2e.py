"""
End-to-End Tests - Full workflows through the command-line tool.
"""

import json
import subprocess
import sys
import tempfile
from pathlib import Path

import pytest

from jsonseq import codec
from jsonseq.reader import JsonSeqReader
from jsonseq.writer import JsonSeqWriter


PROJECT_ROOT = str(Path(__file__).parent.parent)


def run_cli(*args, input_bytes=None):
    return subprocess.run(
        [sys.executable, "-m", "jsonseq", *args],
        input=input_bytes,
        capture_output=True,
        cwd=PROJECT_ROOT,
    )


class TestFullWorkflow:
    """Library-level workflows end-to-end."""

    def test_log_style_append_and_replay(self):
        """Append events across several writer sessions, then replay them all."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "events.json-seq"

            with JsonSeqWriter(open(path, "ab")) as w:
                w.write_value({"event": "start", "seq": 1})
            with JsonSeqWriter(open(path, "ab")) as w:
                w.write_value({"event": "tick", "seq": 2})
                w.write_value({"event": "stop", "seq": 3})

            with JsonSeqReader(open(path, "rb")) as reader:
                events = list(reader)

            assert [e["seq"] for e in events] == [1, 2, 3]
            assert codec.is_json_seq(path)

    def test_truncated_file_keeps_complete_records(self):
        """A crash mid-record leaves earlier records readable."""
        data = codec.dumps([{"a": 1}, {"b": 2}])
        truncated = data + b'\x1e{"c":'
        reader = JsonSeqReader.from_bytes(truncated)
        assert reader.read_value() == {"a": 1}
        assert reader.read_value() == {"b": 2}
        with pytest.raises(ValueError):
            reader.read_value()


class TestCLI:
    """Test the CLI commands via subprocess."""

    def test_cli_help(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert b"RFC 7464" in result.stdout

    def test_cli_version(self):
        result = run_cli("--version")
        assert result.returncode == 0
        assert b"jsonseq 0.1.0" in result.stdout

    def test_cli_no_command(self):
        result = run_cli()
        assert result.returncode == 0
        assert b"encode" in result.stdout

    def test_encode_json_lines_stdin(self):
        result = run_cli("encode", input_bytes=b'{"a": 1}\n\n[1, 2]\n')
        assert result.returncode == 0
        assert result.stdout == b'\x1e{"a":1}\n\x1e[1,2]\n'

    def test_encode_array(self):
        result = run_cli("encode", "--array", input_bytes=b'[{"b": 1, "a": 2}, null]')
        assert result.returncode == 0
        assert codec.loads(result.stdout) == [{"b": 1, "a": 2}, None]

    def test_encode_sort_keys(self):
        result = run_cli("encode", "--sort-keys", input_bytes=b'{"b": 1, "a": 2}\n')
        assert result.stdout == b'\x1e{"a":2,"b":1}\n'

    def test_encode_rejects_bad_line(self):
        result = run_cli("encode", input_bytes=b'{"a": 1}\n{oops\n')
        assert result.returncode == 1
        assert b"line 2" in result.stderr

    def test_encode_array_requires_array(self):
        result = run_cli("encode", "--array", input_bytes=b'{"a": 1}')
        assert result.returncode == 1
        assert b"JSON array" in result.stderr

    def test_decode_to_json_lines(self):
        data = codec.dumps([{"a": 1}, "ü"])
        result = run_cli("decode", input_bytes=data)
        assert result.returncode == 0
        lines = result.stdout.decode("utf-8").splitlines()
        assert [json.loads(line) for line in lines] == [{"a": 1}, "ü"]

    def test_decode_to_array(self):
        data = codec.dumps([1, 2, 3])
        result = run_cli("decode", "--array", input_bytes=data)
        assert result.returncode == 0
        assert json.loads(result.stdout) == [1, 2, 3]

    def test_decode_invalid_record_fails(self):
        result = run_cli("decode", input_bytes=b"\x1e1\n\x1e{\n\x1e3\n")
        assert result.returncode == 1
        assert b"record 2" in result.stderr

    def test_decode_skip_invalid(self):
        result = run_cli("decode", "--skip-invalid", input_bytes=b"\x1e1\n\x1e{\n\x1e3\n")
        assert result.returncode == 0
        assert result.stdout.splitlines() == [b"1", b"3"]
        assert b"Skipped 1 invalid records" in result.stderr

    def test_decode_encode_keeps_line_separator_in_string(self):
        # U+2028 is a line boundary for str.splitlines() but not for JSON Lines
        original = b'\x1e"a\xe2\x80\xa8b"\n'
        decoded = run_cli("decode", input_bytes=original)
        assert decoded.returncode == 0
        encoded = run_cli("encode", input_bytes=decoded.stdout)
        assert encoded.returncode == 0, encoded.stderr
        assert encoded.stdout == original

    def test_encode_decode_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "in.jsonl"
            seq = Path(tmp) / "out.json-seq"
            back = Path(tmp) / "back.jsonl"
            src.write_text('{"x": 1}\n{"x": 2}\n', encoding="utf-8")

            result = run_cli("encode", str(src), "-o", str(seq))
            assert result.returncode == 0
            assert b"Encoded 2 records" in result.stderr
            assert codec.loads(seq.read_bytes()) == [{"x": 1}, {"x": 2}]

            result = run_cli("decode", str(seq), "-o", str(back))
            assert result.returncode == 0
            assert back.read_text(encoding="utf-8") == '{"x": 1}\n{"x": 2}\n'

    def test_validate_ok(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ok.json-seq"
            path.write_bytes(codec.dumps([1, {"a": None}, []]))
            result = run_cli("validate", str(path))
            assert result.returncode == 0
            assert b"OK:" in result.stdout
            assert b"3 records" in result.stdout

    def test_validate_fail(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.json-seq"
            path.write_bytes(b"\x1e1\n\x1e[1,\n")
            result = run_cli("validate", str(path))
            assert result.returncode == 1
            assert b"FAIL:" in result.stdout
            assert b"record 2" in result.stdout

    def test_validate_missing_file(self):
        result = run_cli("validate", "/nonexistent/file.json-seq")
        assert result.returncode == 1
        assert b"File not found" in result.stderr

    def test_identify(self):
        with tempfile.TemporaryDirectory() as tmp:
            seq = Path(tmp) / "a.json-seq"
            seq.write_bytes(codec.dumps([1]))
            plain = Path(tmp) / "a.json"
            plain.write_bytes(b"[1]")

            result = run_cli("identify", str(seq))
            assert result.returncode == 0
            assert b"JSON text sequence" in result.stdout

            result = run_cli("identify", str(plain))
            assert result.returncode == 1
            assert b"not a JSON text sequence" in result.stdout

    def test_verbose_logging(self):
        result = run_cli("-v", "decode", input_bytes=b"\x1e\x1e1\n")
        assert result.returncode == 0
        assert b"Skipped empty segment" in result.stderr
