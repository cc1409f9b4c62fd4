from __future__ import annotations

import subprocess

import pytest

from pixelshift import xrandr
from pixelshift.xrandr import XrandrTool


class _RunRecorder:
    def __init__(self, result=None, exc: Exception | None = None) -> None:
        self.result = result
        self.exc = exc
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        if self.exc is not None:
            raise self.exc
        return self.result


def test_execute_runs_binary_with_args(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _RunRecorder(subprocess.CompletedProcess(["xrandr"], 0, stdout="ok", stderr=""))
    monkeypatch.setattr(xrandr.subprocess, "run", recorder)

    result = XrandrTool(binary="/usr/bin/xrandr").execute(["--output", "DP-1", "--auto"])

    assert result.success
    assert result.stdout == "ok"
    argv, kwargs = recorder.calls[0]
    assert argv == ["/usr/bin/xrandr", "--output", "DP-1", "--auto"]
    assert kwargs["check"] is False
    assert kwargs["capture_output"] is True
    assert kwargs["env"] is None


def test_execute_reports_non_zero_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _RunRecorder(
        subprocess.CompletedProcess(["xrandr"], 1, stdout="", stderr="warning: output DP-9 not found\n")
    )
    monkeypatch.setattr(xrandr.subprocess, "run", recorder)

    result = XrandrTool().execute(["--output", "DP-9", "--auto"])

    assert not result.success
    assert result.stderr == "warning: output DP-9 not found"


def test_execute_reports_launch_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        xrandr.subprocess, "run", _RunRecorder(exc=FileNotFoundError("No such file: 'xrandr'"))
    )

    result = XrandrTool().execute(["--current"])

    assert not result.success
    assert "Failed to launch xrandr" in result.stderr


def test_execute_reports_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        xrandr.subprocess, "run", _RunRecorder(exc=subprocess.TimeoutExpired("xrandr", 10))
    )

    result = XrandrTool(timeout_s=10).execute(["--current"])

    assert not result.success
    assert "timed out" in result.stderr


def test_query_sets_display_and_returns_empty_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _RunRecorder(subprocess.CompletedProcess(["xrandr"], 1, stdout="", stderr="Can't open display"))
    monkeypatch.setattr(xrandr.subprocess, "run", recorder)

    report = XrandrTool(display_env=":1").query()

    assert report == ""
    argv, kwargs = recorder.calls[0]
    assert argv == ["xrandr", "--current"]
    assert kwargs["env"]["DISPLAY"] == ":1"


def test_tool_rejects_non_positive_timeout() -> None:
    with pytest.raises(ValueError):
        XrandrTool(timeout_s=0)
