"""Pipeline runner — drives touch → diff → gate → sync → scrub → smart.

The run stops at the first failing step.  Whatever was measured up to that
point stays in the returned RunOutcome, and ``timings.total`` is recorded on
every exit path.
"""

from __future__ import annotations

import time
from typing import Any, Callable, List, Optional, Protocol, TypeVar

from snapraid_runner.errors import ExecutionError
from snapraid_runner.pipeline.gate import check_thresholds
from snapraid_runner.snapraid.diff_parser import parse_diff
from snapraid_runner.snapraid.models import (
    PipelineConfig,
    RunOutcome,
    ThresholdSet,
)

T = TypeVar("T")

_TAG = "runner"


class CommandExecutor(Protocol):
    """The five snapraid operations the pipeline needs.

    Each blocks until the command finishes and raises ExecutionError when it
    exits with a status that is not acceptable for that operation.
    """

    def touch(self) -> None: ...

    def diff(self) -> List[str]: ...

    def sync(self) -> None: ...

    def scrub(self) -> None: ...

    def smart(self) -> None: ...


class PipelineRunner:
    """Runs the maintenance workflow once per ``run()`` call.

    Usage::

        runner = PipelineRunner(executor, PipelineConfig(), ThresholdSet(), logger)
        outcome = runner.run()
        if outcome.error:
            ...
    """

    def __init__(
        self,
        executor: CommandExecutor,
        config: PipelineConfig,
        thresholds: ThresholdSet,
        logger: Any,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.executor = executor
        self.config = config
        self.thresholds = thresholds
        self._logger = logger
        self._clock = clock

    def run(self) -> RunOutcome:
        outcome = RunOutcome()
        start = self._clock()
        try:
            outcome.error = self._run_steps(outcome)
        finally:
            outcome.timings.total = self._clock() - start

        if outcome.error is not None:
            self._logger.error("Pipeline aborted", error=str(outcome.error), tag=_TAG)
        return outcome

    def _run_steps(self, outcome: RunOutcome) -> Optional[Exception]:
        """Walk the state machine. Returns the terminal error, if any."""
        cfg = self.config

        # touch rewrites timestamps on disk, so never under dry-run
        if cfg.steps.touch and not cfg.dry_run:
            try:
                self._timed(outcome, "touch", self.executor.touch)
            except ExecutionError as exc:
                return exc

        try:
            lines = self._timed(outcome, "diff", self.executor.diff)
        except ExecutionError as exc:
            return exc

        outcome.changes = parse_diff(lines)
        self._log_changes(outcome)

        if cfg.dry_run:
            self._logger.info("Dry run, skipping sync, scrub and smart", tag=_TAG)
            return None

        if outcome.changes.has_changes:
            violation = check_thresholds(outcome.changes, self.thresholds)
            if violation is not None:
                return violation
            try:
                self._timed(outcome, "sync", self.executor.sync)
            except ExecutionError as exc:
                return exc
        else:
            self._logger.info("No changes detected, skipping sync", tag=_TAG)

        if cfg.steps.scrub:
            try:
                self._timed(outcome, "scrub", self.executor.scrub)
            except ExecutionError as exc:
                return exc

        if cfg.steps.smart:
            try:
                self._timed(outcome, "smart", self.executor.smart)
            except ExecutionError as exc:
                return exc

        return None

    def _timed(self, outcome: RunOutcome, step: str, op: Callable[[], T]) -> T:
        """Run *op* and store its duration under *step*, even if it raises."""
        self._logger.info("Step started", step=step, tag=_TAG)
        t0 = self._clock()
        try:
            return op()
        finally:
            elapsed = self._clock() - t0
            setattr(outcome.timings, step, elapsed)
            self._logger.info("Step finished", step=step, seconds=round(elapsed, 3), tag=_TAG)

    def _log_changes(self, outcome: RunOutcome) -> None:
        changes = outcome.changes
        self._logger.info(
            "Diff parsed",
            equal=changes.equal,
            **{c.value: n for c, n in changes.counts().items()},
            tag=_TAG,
        )
