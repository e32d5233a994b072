"""Pipeline orchestration — threshold gate and step runner."""

from snapraid_runner.pipeline.gate import check_thresholds
from snapraid_runner.pipeline.runner import CommandExecutor, PipelineRunner

__all__ = ["CommandExecutor", "PipelineRunner", "check_thresholds"]
