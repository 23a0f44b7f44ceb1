"""
diskdiag.model
AUTHOR: carter-vin

Usage snapshot + derived metrics + reading serialization.

Design goals:
- Explicit structure (no accidental serialization via __dict__)
- Flat reading mapping with a fixed key set
- Deterministic JSON ordering
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import json

READING_KEYS = {
    "path",
    "total_bytes",
    "free_bytes",
    "available_bytes",
    "used_bytes",
    "used_percent",
}

_INT_KEYS = ("total_bytes", "free_bytes", "available_bytes", "used_bytes")


@dataclass(frozen=True)
class UsageSnapshot:
    """
    One disk usage observation
    - used_bytes: total - free
    - used_percent: 0.0 when total is 0, else used / total * 100
    """

    path: str
    total_bytes: int
    free_bytes: int
    available_bytes: int
    used_bytes: int
    used_percent: float

    def to_reading(self) -> dict[str, Any]:
        # Explicit key mapping for stability
        return {
            "path": self.path,
            "total_bytes": self.total_bytes,
            "free_bytes": self.free_bytes,
            "available_bytes": self.available_bytes,
            "used_bytes": self.used_bytes,
            "used_percent": self.used_percent,
        }


def compute_snapshot(path: str, *, total: int, free: int, available: int) -> UsageSnapshot:
    """
    Derive used bytes and used percent from raw counts

    No clamping: free > total yields negative used / percent.
    """
    used = total - free

    used_percent = 0.0
    if total > 0:
        used_percent = used / total * 100

    return UsageSnapshot(
        path=path,
        total_bytes=total,
        free_bytes=free,
        available_bytes=available,
        used_bytes=used,
        used_percent=float(used_percent),
    )


def validate_reading(reading: dict[str, Any]) -> None:
    """
    Validate reading shape

    Raises ValueError on invalid
    """
    if not isinstance(reading, dict):
        raise ValueError("reading must be a dict")

    keys = set(reading.keys())
    if keys != READING_KEYS:
        raise ValueError(f"reading keys must be: {sorted(READING_KEYS)}")

    if not isinstance(reading["path"], str) or not reading["path"]:
        raise ValueError("reading.path must be a non-empty string")

    for key in _INT_KEYS:
        value = reading[key]
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"reading.{key} must be an int")

    if not isinstance(reading["used_percent"], float):
        raise ValueError("reading.used_percent must be a float")


def reading_to_json(reading: dict[str, Any]) -> str:
    """
    Serialize a reading to a single JSON object string

    - sort_keys=True ensures stable key order
    - separators remove whitespace to avoid formatting drift
    """
    return json.dumps(
        reading,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
