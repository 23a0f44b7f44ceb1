"""
diskdiag.collectors.disk
AUTHOR: carter-vin

Disk collector
- Windows: GetDiskFreeSpaceExW via ctypes
- POSIX: os.statvfs
- free and available bytes kept separate (quotas)
- failures raised as DiskUsageError, never retried
"""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from typing import Callable

from diskdiag.logging import emit_event
from diskdiag.model import UsageSnapshot, compute_snapshot

DRIVE_SEPARATOR = ":"
WINDOWS_PATH_SEPARATOR = "\\"


class DiskUsageError(OSError):
    """
    Native free-space query failed for a path

    - filename / path: the path handed to the OS
    - errno / strerror: native error as reported
    - native_code: Windows error code (None on POSIX)
    """

    def __init__(self, path: str, code: int | None, message: str, *, native_code: int | None = None):
        super().__init__(code, message, path)
        self.path = path
        self.native_code = native_code


@dataclass(frozen=True)
class DiskUsage:
    total_bytes: int
    free_bytes: int
    available_bytes: int


def _is_drive_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def normalize_disk_path(path: str, *, default_path: str) -> str:
    """
    Turn a drive/path string into a root the volume query accepts

    - ""   -> default_path
    - "C:" -> "C:\\"
    - "C"  -> "C:\\"
    - anything else unchanged ("/", "/:", "/mnt/data")

    Drive rules only apply when the first character is an ASCII letter.
    """
    if path == "":
        return default_path
    if not _is_drive_letter(path[0]):
        return path
    if len(path) == 2 and path[1] == DRIVE_SEPARATOR:
        return path + WINDOWS_PATH_SEPARATOR
    if len(path) == 1:
        return path + DRIVE_SEPARATOR + WINDOWS_PATH_SEPARATOR
    return path


def _query_windows(path: str) -> DiskUsage:
    import ctypes

    available = ctypes.c_ulonglong()
    total = ctypes.c_ulonglong()
    free = ctypes.c_ulonglong()

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
    ret = kernel32.GetDiskFreeSpaceExW(
        ctypes.c_wchar_p(path),
        ctypes.byref(available),
        ctypes.byref(total),
        ctypes.byref(free),
    )
    if ret == 0:
        err = ctypes.WinError(ctypes.get_last_error())
        raise DiskUsageError(path, err.errno, err.strerror, native_code=err.winerror)

    return DiskUsage(
        total_bytes=total.value,
        free_bytes=free.value,
        available_bytes=available.value,
    )


def _query_posix(path: str) -> DiskUsage:
    try:
        st = os.statvfs(path)
    except OSError as e:
        raise DiskUsageError(path, e.errno, e.strerror or str(e)) from e

    return DiskUsage(
        total_bytes=st.f_blocks * st.f_frsize,
        free_bytes=st.f_bfree * st.f_frsize,
        available_bytes=st.f_bavail * st.f_frsize,
    )


def get_disk_usage(path: str) -> DiskUsage:
    """
    Query total / free / available bytes for the volume containing path

    Blocks for the duration of the native call.
    """
    emit_event("disk_query", path=path, platform=os.name)

    try:
        # Neither native API accepts embedded NUL characters
        if "\x00" in path:
            raise DiskUsageError(path, errno.EINVAL, "path contains a NUL character")

        if os.name == "nt":
            usage = _query_windows(path)
        else:
            usage = _query_posix(path)

    except DiskUsageError as e:
        emit_event(
            "disk_query_failed",
            path=path,
            errno=e.errno,
            native_code=e.native_code,
            message=e.strerror or str(e),
            codepoints=[f"U+{ord(ch):04X}" for ch in path],
        )
        raise

    emit_event(
        "disk_query",
        path=path,
        total_bytes=usage.total_bytes,
        free_bytes=usage.free_bytes,
        available_bytes=usage.available_bytes,
    )
    return usage


def collect_disk(
    path: str,
    *,
    default_path: str,
    query: Callable[[str], DiskUsage] = get_disk_usage,
) -> UsageSnapshot:
    """
    Normalize, query, and derive metrics for a single path
    """
    normalized = normalize_disk_path(path, default_path=default_path)
    emit_event("disk_path_normalized", raw_path=path, path=normalized)

    usage = query(normalized)
    return compute_snapshot(
        normalized,
        total=usage.total_bytes,
        free=usage.free_bytes,
        available=usage.available_bytes,
    )
