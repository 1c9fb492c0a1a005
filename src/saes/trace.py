"""
Trace recording and pretty printing for S-AES operations.

Contains:
- TraceRecorder: JSON Lines trace + compact verbose stdout
- print_header / print_result: shared formatting helpers
"""

import json
from typing import Any, TextIO

from .state import BlockState
from .utils import format_state_line, state_to_hex


class TraceRecorder:
    """
    Records and outputs traces of S-AES execution.

    Supports:
    - JSON Lines file output  (always, when trace_file is set)
    - Compact verbose stdout  (one line per transformation)
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []
        self._seq = 0

    def record(self, **kwargs) -> None:
        """
        Record a trace entry.

        Every entry gets a monotonic "seq" number. BlockState values are
        stored as 4-char hex strings.
        """
        entry = {"seq": self._seq}
        entry.update(self._make_serializable(kwargs))
        self._seq += 1
        self._records.append(entry)

        if self.trace_file:
            self._write_jsonl(entry)

        if self.verbose:
            self._print_verbose(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        self.trace_file.write(json.dumps(record) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, BlockState):
            return state_to_hex(obj)
        else:
            return obj

    def _print_verbose(self, record: dict[str, Any]) -> None:
        direction = record.get("direction", "?")
        round_num = record.get("round", "?")
        operation = record.get("operation", "unknown")

        if "state" in record:
            line = f"{direction[:3].upper()} R{round_num}  {operation:16s} STATE:{format_state_line(record['state'])}"
            if "round_key" in record:
                line += f"  KEY:{format_state_line(record['round_key'])}"
            print(line)

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
        self._seq = 0


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*60}")
    print(f"# {title}")
    print(f"{'#'*60}")


def print_result(label: str, block: BlockState, passed: bool | None = None) -> None:
    """Print final encryption/decryption result."""
    print(f"\n{'='*60}")
    print("RESULT")
    print(f"{'='*60}")
    print(f"{label}: {format_state_line(block)} ({state_to_hex(block)})")

    if passed is not None:
        status = "PASS" if passed else "FAIL"
        marker = "[OK]" if passed else "[ERROR]"
        print(f"Verification: {marker} {status}")
    print(f"{'='*60}")
