"""snapraid interface layer — process adapter, diff parsing, models."""

from snapraid_runner.snapraid.adapter import SnapraidExecutor
from snapraid_runner.snapraid.diff_parser import parse_diff
from snapraid_runner.snapraid.models import (
    Category,
    ChangeSet,
    PipelineConfig,
    RunOutcome,
    Steps,
    StepTiming,
    ThresholdSet,
)
from snapraid_runner.snapraid.tap import LineTap

__all__ = [
    "Category",
    "ChangeSet",
    "LineTap",
    "PipelineConfig",
    "RunOutcome",
    "SnapraidExecutor",
    "StepTiming",
    "Steps",
    "ThresholdSet",
    "parse_diff",
]
