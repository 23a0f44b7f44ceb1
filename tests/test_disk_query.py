"""
Contract test for the native disk usage query
"""

import ctypes
import errno
import json
import os
from pathlib import Path
from types import SimpleNamespace

import pytest

from diskdiag.collectors import disk as disk_module
from diskdiag.collectors.disk import DiskUsage, DiskUsageError, collect_disk, get_disk_usage

posix_only = pytest.mark.skipif(os.name == "nt", reason="statvfs path")


@posix_only
def test_query_existing_path_returns_counts(tmp_path: Path) -> None:
    """
    A real directory yields non-negative counts with available <= free <= total
    """
    usage = get_disk_usage(str(tmp_path))

    assert usage.total_bytes > 0
    assert 0 <= usage.available_bytes <= usage.free_bytes <= usage.total_bytes


@posix_only
def test_query_missing_path_raises_typed_error(tmp_path: Path, capsys) -> None:
    """
    Missing path surfaces path and native errno, with a failure event
    """
    missing = str(tmp_path / "does-not-exist")

    with pytest.raises(DiskUsageError) as excinfo:
        get_disk_usage(missing)

    assert excinfo.value.path == missing
    assert excinfo.value.filename == missing
    assert excinfo.value.errno == errno.ENOENT
    assert isinstance(excinfo.value, OSError)

    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    failed = [event for event in events if event["event_type"] == "disk_query_failed"]
    assert len(failed) == 1
    assert failed[0]["path"] == missing


def test_query_rejects_nul_character() -> None:
    """
    Malformed paths fail before reaching the OS
    """
    with pytest.raises(DiskUsageError) as excinfo:
        get_disk_usage("C:\x00")

    assert excinfo.value.errno == errno.EINVAL


def test_collect_disk_normalizes_before_query() -> None:
    """
    The query sees the normalized path and the snapshot carries it
    """
    seen: list[str] = []

    def fake_query(path: str) -> DiskUsage:
        seen.append(path)
        return DiskUsage(total_bytes=1000, free_bytes=400, available_bytes=350)

    snap = collect_disk("D:", default_path="C:\\", query=fake_query)

    assert seen == ["D:\\"]
    assert snap.path == "D:\\"
    assert snap.used_bytes == 600
    assert snap.used_percent == 60.0
    assert snap.available_bytes == 350


def test_collect_disk_empty_path_uses_default() -> None:
    seen: list[str] = []

    def fake_query(path: str) -> DiskUsage:
        seen.append(path)
        return DiskUsage(total_bytes=0, free_bytes=0, available_bytes=0)

    snap = collect_disk("", default_path="C:\\", query=fake_query)

    assert seen == ["C:\\"]
    assert snap.used_percent == 0.0


class _FakeKernel32:
    """
    Stand-in for kernel32 that fills the out-parameters like the real call
    """

    def __init__(self, ret: int, *, available: int = 0, total: int = 0, free: int = 0) -> None:
        self.ret = ret
        self.values = (available, total, free)
        self.paths: list[str] = []

    def GetDiskFreeSpaceExW(self, path_ptr, available_ref, total_ref, free_ref) -> int:
        self.paths.append(path_ptr.value)
        if self.ret:
            available_ref._obj.value, total_ref._obj.value, free_ref._obj.value = self.values
        return self.ret


def _use_windows(monkeypatch: pytest.MonkeyPatch, kernel32: _FakeKernel32, *, last_error: int = 0) -> None:
    monkeypatch.setattr(disk_module, "os", SimpleNamespace(name="nt"))
    monkeypatch.setattr(ctypes, "WinDLL", lambda name, use_last_error=False: kernel32, raising=False)
    monkeypatch.setattr(ctypes, "get_last_error", lambda: last_error, raising=False)
    monkeypatch.setattr(
        ctypes,
        "WinError",
        lambda code: SimpleNamespace(
            errno=errno.ENOENT,
            strerror="The system cannot find the path specified",
            winerror=code,
        ),
        raising=False,
    )


def test_windows_query_maps_out_parameters(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    available / total / free land in the matching DiskUsage fields
    """
    kernel32 = _FakeKernel32(1, available=300, total=1000, free=400)
    _use_windows(monkeypatch, kernel32)

    usage = get_disk_usage("C:\\")

    assert kernel32.paths == ["C:\\"]
    assert usage == DiskUsage(total_bytes=1000, free_bytes=400, available_bytes=300)


def test_windows_query_failure_carries_native_error(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """
    A zero return becomes DiskUsageError with errno, winerror and message
    """
    kernel32 = _FakeKernel32(0)
    _use_windows(monkeypatch, kernel32, last_error=3)

    with pytest.raises(DiskUsageError) as excinfo:
        get_disk_usage("Q:\\")

    assert excinfo.value.path == "Q:\\"
    assert excinfo.value.errno == errno.ENOENT
    assert excinfo.value.native_code == 3
    assert excinfo.value.strerror == "The system cannot find the path specified"

    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert events[-1]["event_type"] == "disk_query_failed"
    assert events[-1]["native_code"] == 3
