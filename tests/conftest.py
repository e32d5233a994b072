"""Shared test fixtures — fake executors, recording loggers, fake snapraid binaries."""

from __future__ import annotations

import logging
import stat
import textwrap
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
import structlog

from snapraid_runner.errors import ExecutionError


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def log(self, level: int, event: str, **kw: Any) -> None:
        self.records.append({"level": level, "event": event, **kw})

    def debug(self, event: str, **kw: Any) -> None:
        self.log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self.log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self.log(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self.log(logging.ERROR, event, **kw)

    def events(self, tag: Optional[str] = None) -> List[str]:
        return [r["event"] for r in self.records if tag is None or r.get("tag") == tag]


class FakeExecutor:
    """In-memory CommandExecutor that records which operations ran."""

    def __init__(
        self,
        diff_lines: Optional[List[str]] = None,
        fail: Optional[Dict[str, ExecutionError]] = None,
        on_call: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.diff_lines = diff_lines or []
        self.fail = fail or {}
        self.on_call = on_call
        self.calls: List[str] = []

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.on_call is not None:
            self.on_call(name)
        if name in self.fail:
            raise self.fail[name]

    def count(self, name: str) -> int:
        return self.calls.count(name)

    def touch(self) -> None:
        self._call("touch")

    def diff(self) -> List[str]:
        self._call("diff")
        return list(self.diff_lines)

    def sync(self) -> None:
        self._call("sync")

    def scrub(self) -> None:
        self._call("scrub")

    def smart(self) -> None:
        self._call("smart")


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def sample_diff_lines() -> List[str]:
    """Typical ``snapraid diff`` output with banners and summary lines."""
    return textwrap.dedent("""\
        Loading state from /var/snapraid/content...
        Comparing...
        add photos/2024/img\\ 001.jpg
        add photos/2024/img_002.jpg
        remove old/report.pdf
        update docs/notes.txt
        move music/a.flac -> music/b.flac
        copy video/clip.mkv -> backup/clip.mkv
        restore misc/restored.bin

            1234 equal
               2 added
               1 removed
               1 updated
               1 moved
               1 copied
               1 restored
        There are differences!
    """).splitlines()


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + textwrap.dedent(body), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def make_snapraid(tmp_path: Path) -> Callable[..., Path]:
    """Factory for a fake snapraid binary.

    Every invocation appends its arguments to ``calls.log`` next to the
    script.  ``diff`` prints *diff_output*; *exit_codes* maps a subcommand
    to its exit status and *stderr* maps a subcommand to error text.
    """

    def factory(
        diff_output: str = "",
        exit_codes: Optional[Dict[str, int]] = None,
        stderr: Optional[Dict[str, str]] = None,
    ) -> Path:
        exit_codes = exit_codes or {}
        stderr = stderr or {}
        (tmp_path / "diff_output.txt").write_text(diff_output, encoding="utf-8")
        cases = []
        for cmd in ("touch", "diff", "sync", "scrub", "smart"):
            lines = []
            if cmd == "diff":
                lines.append(f'cat "{tmp_path}/diff_output.txt"')
            else:
                lines.append(f'echo "{cmd} done"')
            if cmd in stderr:
                lines.append(f'printf "%s\\n" "{stderr[cmd]}" >&2')
            lines.append(f"exit {exit_codes.get(cmd, 0)}")
            cases.append(f"  {cmd})\n    " + "\n    ".join(lines) + "\n    ;;")
        body = (
            f'echo "$@" >> "{tmp_path}/calls.log"\n'
            'case "$1" in\n'
            + "\n".join(cases)
            + "\n  *)\n    exit 64\n    ;;\nesac\n"
        )
        return _write_script(tmp_path / "snapraid", body)

    return factory


@pytest.fixture
def snapraid_conf(tmp_path: Path) -> Path:
    conf = tmp_path / "snapraid.conf"
    conf.write_text("parity /mnt/parity/snapraid.parity\n", encoding="utf-8")
    return conf


def read_calls(script: Path) -> List[List[str]]:
    log = script.parent / "calls.log"
    if not log.exists():
        return []
    return [line.split() for line in log.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def snapraid_calls() -> Callable[[Path], List[List[str]]]:
    """Return the argv lists a fake snapraid binary was invoked with."""
    return read_calls


@pytest.fixture
def make_executor() -> Callable[..., FakeExecutor]:
    return FakeExecutor
