"""Generate an example .json-seq file to see what the format looks like."""

import sys
sys.path.insert(0, str(__import__("pathlib").Path(__file__).parent.parent))

from jsonseq.reader import JsonSeqReader
from jsonseq.writer import JsonSeqWriter

events = [
    {"event": "job.start", "job": "nightly-export", "ts": "2026-10-19T02:00:00Z"},
    {"event": "job.progress", "job": "nightly-export", "rows": 125000},
    {"event": "job.warning", "job": "nightly-export", "message": "slow query\ntook 4.2s"},
    {"event": "job.end", "job": "nightly-export", "ok": True, "rows": 250000},
]

# Write the example
output = __import__("pathlib").Path(__file__).parent / "events.json-seq"
with JsonSeqWriter(open(output, "wb")) as w:
    w.write_values(events)
print(f"Generated {output} ({output.stat().st_size} bytes)")

# Show the raw framing: RS before each record, LF after
print()
print("=" * 60)
print("RAW .json-seq FILE CONTENTS (RS shown as <RS>):")
print("=" * 60)
print()
print(output.read_bytes().decode("utf-8").replace("\x1e", "<RS>"), end="")

# Read it back
print()
with JsonSeqReader(open(output, "rb")) as reader:
    for value in reader:
        print(value["event"])
