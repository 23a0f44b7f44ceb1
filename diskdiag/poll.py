"""
diskdiag.poll
AUTHOR: carter-vin

One poll cycle for a polling caller

- a failed disk query or a read after close() becomes a PollOutcome
  with no reading; the caller decides whether to log, skip, or alert
- anything else is a bug and propagates
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from diskdiag.collectors.disk import DiskUsageError
from diskdiag.logging import emit_event
from diskdiag.sensor import DiskSensor, SensorClosedError


@dataclass(frozen=True)
class PollOutcome:
    """
    Result of one poll cycle
    - reading: flat reading mapping, None on failure
    - errno / native_code: set for DiskUsageError only
    """

    sensor: str
    reading: Optional[dict[str, Any]] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    errno: Optional[int] = None
    native_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.reading is not None


def poll_once(sensor: DiskSensor) -> PollOutcome:
    try:
        reading = sensor.readings()
    except DiskUsageError as e:
        # get_disk_usage already emitted disk_query_failed with native detail
        return PollOutcome(
            sensor=sensor.name,
            error_type=type(e).__name__,
            error_message=str(e),
            errno=e.errno,
            native_code=e.native_code,
        )
    except SensorClosedError as e:
        emit_event("read_refused", sensor=sensor.name, message=str(e))
        return PollOutcome(
            sensor=sensor.name,
            error_type=type(e).__name__,
            error_message=str(e),
        )

    return PollOutcome(sensor=sensor.name, reading=reading)
