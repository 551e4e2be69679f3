"""
jsonseq CLI - Command-line interface for JSON text sequence files.

Commands:
  jsonseq encode   - Convert JSON Lines (or a JSON array) to a JSON text sequence
  jsonseq decode   - Convert a JSON text sequence to JSON Lines (or a JSON array)
  jsonseq validate - Check that every record in a sequence is valid JSON
  jsonseq identify - Quick check if a file is a JSON text sequence
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import BinaryIO, ContextManager

logger = logging.getLogger(__name__)


def _open_input(path: str | None) -> ContextManager[BinaryIO]:
    """Open path for binary reading, or borrow stdin for '-' / None."""
    if path in (None, "-"):
        return contextlib.nullcontext(sys.stdin.buffer)
    input_path = Path(path)
    if not input_path.is_file():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    return open(input_path, "rb")


def _open_output(path: str | None) -> ContextManager[BinaryIO]:
    """Open path for binary writing, or borrow stdout for '-' / None."""
    if path in (None, "-"):
        return contextlib.nullcontext(sys.stdout.buffer)
    return open(path, "wb")


def cmd_encode(args: argparse.Namespace) -> None:
    """Encode JSON Lines or a JSON array as a JSON text sequence."""
    from jsonseq.errors import RecordEncodeError
    from jsonseq.writer import JsonSeqWriter

    with _open_input(args.input) as src:
        data = src.read()

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        print(f"Error: input is not valid UTF-8: {e}", file=sys.stderr)
        sys.exit(1)

    if args.array:
        try:
            values = json.loads(text)
        except json.JSONDecodeError as e:
            print(f"Error: input is not valid JSON: {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(values, list):
            print("Error: --array input must be a JSON array", file=sys.stderr)
            sys.exit(1)
    else:
        values = []
        for lineno, line in enumerate(text.split("\n"), start=1):
            if not line.strip():
                continue
            try:
                values.append(json.loads(line))
            except json.JSONDecodeError as e:
                print(f"Error: line {lineno}: {e}", file=sys.stderr)
                sys.exit(1)

    with _open_output(args.output) as dst:
        writer = JsonSeqWriter(dst, owns_stream=False, sort_keys=args.sort_keys)
        try:
            count = writer.write_values(values)
        except RecordEncodeError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        dst.flush()

    logger.info("Encoded %d records", count)
    if args.output not in (None, "-"):
        print(f"Encoded {count} records -> {args.output}", file=sys.stderr)


def cmd_decode(args: argparse.Namespace) -> None:
    """Decode a JSON text sequence to JSON Lines or a JSON array."""
    from jsonseq.errors import RecordDecodeError
    from jsonseq.reader import JsonSeqReader

    decoded: list = []
    skipped = 0

    with _open_input(args.input) as src, _open_output(args.output) as dst:
        reader = JsonSeqReader(src, owns_stream=False)
        index = 0
        while True:
            index += 1
            try:
                value = next(reader)
            except StopIteration:
                break
            except RecordDecodeError as e:
                if not args.skip_invalid:
                    print(f"Error: record {index}: {e.reason}", file=sys.stderr)
                    sys.exit(1)
                skipped += 1
                logger.debug("Skipped invalid record %d: %s", index, e.reason)
                continue

            if args.array:
                decoded.append(value)
            else:
                dst.write(json.dumps(value, ensure_ascii=False).encode("utf-8") + b"\n")

        if args.array:
            dst.write(json.dumps(decoded, ensure_ascii=False, indent=2).encode("utf-8") + b"\n")
        dst.flush()

    if skipped:
        print(f"Skipped {skipped} invalid records", file=sys.stderr)


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate that every record in a JSON text sequence parses."""
    from jsonseq.errors import RecordDecodeError
    from jsonseq.reader import EOS, JsonSeqReader

    path = args.input
    count = 0
    with _open_input(path) as src:
        reader = JsonSeqReader(src, owns_stream=False)
        while True:
            try:
                value = reader.read_value()
            except RecordDecodeError as e:
                print(f"FAIL: {path}: record {count + 1}: {e.reason}")
                sys.exit(1)
            if value is EOS:
                break
            count += 1

    print(f"OK: {path} ({count} records)")


def cmd_identify(args: argparse.Namespace) -> None:
    """Quick check if a file is a JSON text sequence."""
    from jsonseq.codec import is_json_seq

    if not Path(args.path).is_file():
        print(f"Error: File not found: {args.path}", file=sys.stderr)
        sys.exit(1)

    is_seq = is_json_seq(args.path)
    if is_seq:
        print(f"{args.path}: JSON text sequence")
    else:
        print(f"{args.path}: not a JSON text sequence")
    sys.exit(0 if is_seq else 1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="jsonseq",
        description="jsonseq - JSON text sequences (RFC 7464, application/json-seq).",
    )
    from jsonseq import __version__
    parser.add_argument("--version", action="version", version=f"jsonseq {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    sub = parser.add_subparsers(dest="command")

    # encode
    p_encode = sub.add_parser("encode", help="Convert JSON Lines to a JSON text sequence")
    p_encode.add_argument("input", nargs="?", help="Input file (default: stdin)")
    p_encode.add_argument("-o", "--output", help="Output file (default: stdout)")
    p_encode.add_argument("--array", action="store_true", help="Input is a single JSON array")
    p_encode.add_argument("--sort-keys", action="store_true", help="Sort object keys in each record")

    # decode
    p_decode = sub.add_parser("decode", help="Convert a JSON text sequence to JSON Lines")
    p_decode.add_argument("input", nargs="?", help="Input file (default: stdin)")
    p_decode.add_argument("-o", "--output", help="Output file (default: stdout)")
    p_decode.add_argument("--array", action="store_true", help="Emit a single JSON array")
    p_decode.add_argument("--skip-invalid", action="store_true", help="Drop records that are not valid JSON")

    # validate
    p_validate = sub.add_parser("validate", help="Check every record is valid JSON")
    p_validate.add_argument("input", help="Path to JSON text sequence file ('-' for stdin)")

    # identify
    p_identify = sub.add_parser("identify", help="Quick check if a file is a JSON text sequence")
    p_identify.add_argument("path", help="Path to file")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        sys.exit(0)

    commands = {
        "encode": cmd_encode,
        "decode": cmd_decode,
        "validate": cmd_validate,
        "identify": cmd_identify,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
