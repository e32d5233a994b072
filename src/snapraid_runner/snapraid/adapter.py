"""snapraid subprocess wrapper — one method per supervised subcommand."""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, Any, FrozenSet, List, Sequence, Tuple

from snapraid_runner.errors import ExecutionError
from snapraid_runner.snapraid.tap import LineTap

# snapraid diff exits 2 when it found differences
_DIFF_OK: FrozenSet[int] = frozenset({0, 2})
_DEFAULT_OK: FrozenSet[int] = frozenset({0})

_CHUNK = 64 * 1024


def _pump(
    stream: IO[bytes], capture: bytearray, tap: LineTap, failures: List[BaseException],
) -> None:
    """Copy *stream* into *capture* and *tap* until EOF.

    The pipe is drained to EOF even when the tap fails, otherwise the child
    blocks on a full pipe and never exits.  The tap error lands in *failures*.
    """
    tapping = True
    try:
        for chunk in iter(lambda: stream.read1(_CHUNK), b""):  # type: ignore[attr-defined]
            capture.extend(chunk)
            if not tapping:
                continue
            try:
                tap.write(chunk)
            except Exception as exc:
                failures.append(exc)
                tapping = False
    finally:
        stream.close()


def split_lines(text: str) -> List[str]:
    """Split on "\\n" only, dropping one trailing "\\r" per line.

    str.splitlines also breaks on form feeds, U+2028 and other separators
    that are legal inside file names.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class SnapraidExecutor:
    """Runs snapraid subcommands and streams their output into the log.

    stdout is logged at INFO and stderr at ERROR, each through its own
    LineTap, tagged with the subcommand name.  Both taps are flushed before
    a method returns so output of consecutive steps never interleaves.
    """

    def __init__(
        self,
        binary: str | Path,
        config_file: str | Path,
        logger: Any,
        *,
        scrub_plan: int = 22,
        scrub_older_than: int = 12,
    ) -> None:
        self.binary = str(binary)
        self.config_file = str(config_file)
        self.scrub_plan = scrub_plan
        self.scrub_older_than = scrub_older_than
        self._logger = logger

    # --- contract ---

    def touch(self) -> None:
        self._run("touch")

    def diff(self) -> List[str]:
        stdout, _ = self._run("diff", ok_codes=_DIFF_OK)
        return split_lines(stdout)

    def sync(self) -> None:
        self._run("sync")

    def scrub(self) -> None:
        self._run(
            "scrub",
            [
                "--plan", str(self.scrub_plan),
                "--older-than", str(self.scrub_older_than),
            ],
        )

    def smart(self) -> None:
        self._run("smart")

    # --- plumbing ---

    def build_argv(self, command: str, extra: Sequence[str] = ()) -> List[str]:
        return [self.binary, command, "--conf", self.config_file, "--quiet", *extra]

    def _run(
        self,
        command: str,
        extra: Sequence[str] = (),
        *,
        ok_codes: FrozenSet[int] = _DEFAULT_OK,
    ) -> Tuple[str, str]:
        """Run one subcommand. Returns (stdout, stderr); raises ExecutionError."""
        argv = self.build_argv(command, extra)
        self._logger.info("Running snapraid", command=command, argv=argv, tag=command)

        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise ExecutionError(command, None, str(exc)) from exc

        out_buf = bytearray()
        err_buf = bytearray()
        out_tap = LineTap(self._logger, command, logging.INFO)
        err_tap = LineTap(self._logger, command, logging.ERROR)
        failures: List[BaseException] = []

        readers = [
            threading.Thread(target=_pump, args=(proc.stdout, out_buf, out_tap, failures), daemon=True),
            threading.Thread(target=_pump, args=(proc.stderr, err_buf, err_tap, failures), daemon=True),
        ]
        for t in readers:
            t.start()
        returncode = proc.wait()
        for t in readers:
            t.join()
        out_tap.flush()
        err_tap.flush()
        if failures:
            raise failures[0]

        stdout = out_buf.decode("utf-8", errors="replace")
        stderr = err_buf.decode("utf-8", errors="replace")
        if returncode not in ok_codes:
            raise ExecutionError(command, returncode, stderr)
        return stdout, stderr
