"""
diskdiag.sensor
AUTHOR: carter-vin

Disk sensor facade

Lifecycle:
- construct with a DiskConfig (default path applied here, at validation time)
- readings(): synchronous, one native query per call
- do_command(): always rejected
- close(): no new reads afterwards; an in-flight query is not interrupted

Registration is explicit: callers hand their own registry to
register_disk_sensor(); nothing registers on import.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, MutableMapping, Optional

from diskdiag.collectors.disk import DiskUsage, collect_disk, get_disk_usage
from diskdiag.config import DiskConfig, default_disk_path, parse_config, validate_config
from diskdiag.logging import emit_event

DISK_MODEL = "bill:windows-diagnostics:disk"


class UnimplementedError(NotImplementedError):
    """Generic command channel is a stub."""

    def __init__(self) -> None:
        super().__init__("unimplemented")


class SensorClosedError(RuntimeError):
    """Read requested after close()."""


class DiskSensor:
    def __init__(
        self,
        name: str,
        config: DiskConfig,
        *,
        default_path: Optional[str] = None,
        query: Callable[[str], DiskUsage] = get_disk_usage,
    ) -> None:
        self.name = name
        self.default_path = default_path if default_path is not None else default_disk_path()
        self.config = validate_config(config, default_path=self.default_path)
        self._query = query
        self._closed = False

        emit_event("sensor_start", sensor=self.name, path=self.config.path)

    @property
    def closed(self) -> bool:
        return self._closed

    def readings(self, extra: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """
        Take one disk usage reading

        Raises DiskUsageError when the OS query fails, SensorClosedError
        after close(). No partial reading is ever returned.
        """
        if self._closed:
            raise SensorClosedError(f"sensor {self.name!r} is closed")

        snapshot = collect_disk(
            self.config.path,
            default_path=self.default_path,
            query=self._query,
        )

        emit_event(
            "disk_reading",
            sensor=self.name,
            path=snapshot.path,
            used_percent=snapshot.used_percent,
        )
        return snapshot.to_reading()

    def do_command(self, command: Mapping[str, Any]) -> dict[str, Any]:
        emit_event("command_rejected", sensor=self.name, command_keys=sorted(str(key) for key in command))
        raise UnimplementedError()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        emit_event("sensor_closed", sensor=self.name)

    def __enter__(self) -> "DiskSensor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def new_disk_sensor(name: str, raw_config: Mapping[str, Any], **kwargs: Any) -> DiskSensor:
    """
    Factory: raw config mapping -> DiskSensor
    """
    return DiskSensor(name, parse_config(raw_config), **kwargs)


def register_disk_sensor(registry: MutableMapping[str, Callable[..., DiskSensor]]) -> None:
    """
    Add the disk sensor factory to a caller-owned registry
    """
    registry[DISK_MODEL] = new_disk_sensor
