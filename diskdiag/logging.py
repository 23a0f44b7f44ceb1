"""
diskdiag.logging
AUTHOR: carter-vin

Structured JSON event logging for the disk sensor

Contract:
- One JSON object per line to stdout
- Stable event vocabulary (allowlist)
- UTC timestamps only
- Debug events only when DISKDIAG_DEBUG=1
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

SENSOR_VERSION = "0.1.0"

DEBUG_ENV = "DISKDIAG_DEBUG"

# Event types
VALID_EVENT_TYPES = {
    "sensor_start",
    "config_defaulted",
    "disk_path_normalized",
    "disk_query",
    "disk_query_failed",
    "disk_reading",
    "command_rejected",
    "sensor_closed",
    "spool_write_failed",
    "read_refused",
}

DEBUG_EVENT_TYPES = {
    "config_defaulted",
    "disk_path_normalized",
    "disk_query",
}


def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV) == "1"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, sensor_version: str = SENSOR_VERSION, **fields: Any) -> None:
    """
    Emit structured event line to stdout

    Rules:
    - event_type in VALID_EVENT_TYPES
    - debug event types dropped unless DISKDIAG_DEBUG=1
    - event_type, sensor_version, timestamp always present
    - sort_keys + compact separators for format
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if event_type in DEBUG_EVENT_TYPES and not debug_enabled():
        return

    if "message" in fields and isinstance(fields["message"], str):
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "sensor_version": sensor_version,
        **fields,
    }

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
    )
