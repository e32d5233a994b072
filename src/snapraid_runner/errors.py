"""Exception types shared across the runner."""

from __future__ import annotations

from typing import Optional


class RunnerError(Exception):
    """Base class for every error the runner reports."""


class ExecutionError(RunnerError):
    """A snapraid subcommand exited with an unacceptable status.

    ``stderr`` holds whatever the command wrote to its error stream so the
    caller can report context.  ``returncode`` is ``None`` when the process
    could not be started at all.
    """

    def __init__(self, command: str, returncode: Optional[int], stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            msg = f"snapraid {command} could not be started"
        else:
            msg = f"snapraid {command} failed with exit code {returncode}"
        if stderr.strip():
            msg += f"\nstderr:\n{stderr.rstrip()}"
        super().__init__(msg)


class ThresholdViolation(RunnerError):
    """A change category exceeded its configured limit."""

    def __init__(self, category: str, actual: int, limit: int) -> None:
        self.category = category
        self.actual = actual
        self.limit = limit
        super().__init__(f"{category} files exceed threshold ({actual} > {limit})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ThresholdViolation):
            return NotImplemented
        return (self.category, self.actual, self.limit) == (
            other.category,
            other.actual,
            other.limit,
        )

    def __hash__(self) -> int:
        return hash((self.category, self.actual, self.limit))


class ConfigError(RunnerError):
    """Raised when config is malformed, unreadable, or fails validation."""


class ReportError(RunnerError):
    """Raised when a run result cannot be persisted or read back."""


class NotifyError(RunnerError):
    """Raised when a Slack notification is rejected or cannot be delivered."""
