"""diskdiag.collectors package exports."""

from diskdiag.collectors.disk import (
    DiskUsage,
    DiskUsageError,
    collect_disk,
    get_disk_usage,
    normalize_disk_path,
)

__all__ = [
    "DiskUsage",
    "DiskUsageError",
    "collect_disk",
    "get_disk_usage",
    "normalize_disk_path",
]
