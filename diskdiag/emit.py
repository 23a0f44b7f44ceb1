"""
diskdiag.emit

AUTHOR: carter-vin

OUTPUT:
- reading JSON to stdout
- optional JSON Lines spool file, one reading per line, append-only

Design goals:
- Create spool directory if missing
- Flush per write so tail/ingest can see updates immediately
- Provide explicit error surfaces (do not silently drop data)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional


@dataclass(frozen=True)
class EmitTargets:
    """
    Where a reading goes
    - spool_path: None disables the spool
    """

    spool_path: Optional[Path] = None
    emit_stdout: bool = True


def append_jsonl_line(spool_path: Path, line: str) -> None:
    """
    Append a single JSON string as one JSONL line.

    Contract:
    - 'line' must already be valid JSON (single object)
    - this function adds exactly one trailing newline

    Failure semantics:
    - raises on IO errors; caller decides how to handle
    """
    spool_path.parent.mkdir(parents=True, exist_ok=True)

    with spool_path.open(mode="a", encoding="utf-8", newline="\n") as f:
        f.write(line)
        f.write("\n")
        f.flush()


def emit_reading_json(
    reading_json: str,
    targets: EmitTargets,
    *,
    on_spool_error: Optional[Callable[[Exception, Path], None]] = None,
) -> None:
    """
    Emit a reading JSON string to configured targets.

    reading_json:
    - must be a single JSON object string (no trailing newline)
    """
    if targets.emit_stdout:
        print(reading_json)

    if targets.spool_path is None:
        return

    try:
        append_jsonl_line(targets.spool_path, reading_json)
    except Exception as e:
        # Callback allows the caller to surface spool errors without coupling modules
        if on_spool_error is not None:
            on_spool_error(e, targets.spool_path)
        raise
