"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field

from snapraid_runner.snapraid.models import DISABLED, PipelineConfig, Steps, ThresholdSet

DEFAULT_BIN = "/usr/bin/snapraid"
DEFAULT_SNAPRAID_CONFIG = "/etc/snapraid.conf"


@dataclass
class ThresholdsConfig:
    add: int = DISABLED
    remove: int = 80
    update: int = 400
    copy: int = DISABLED
    move: int = DISABLED
    restore: int = DISABLED

    def to_threshold_set(self) -> ThresholdSet:
        return ThresholdSet(
            add=self.add,
            remove=self.remove,
            update=self.update,
            move=self.move,
            copy=self.copy,
            restore=self.restore,
        )


@dataclass
class StepsConfig:
    touch: bool = False
    scrub: bool = False
    smart: bool = False


@dataclass
class ScrubConfig:
    plan: int = 22  # percent of the array, 0-100
    older_than: int = 12  # days


@dataclass
class NotifyConfig:
    slack_token: str = ""
    slack_channel: str = ""
    web: str = ""  # base URL of a result viewer; links are added to messages


@dataclass
class RunnerConfig:
    snapraid_bin: str = DEFAULT_BIN
    snapraid_config: str = DEFAULT_SNAPRAID_CONFIG
    output_dir: str = ""  # empty disables result files
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)
    steps: StepsConfig = field(default_factory=StepsConfig)
    scrub: ScrubConfig = field(default_factory=ScrubConfig)
    notifications: NotifyConfig = field(default_factory=NotifyConfig)

    def wants_slack(self) -> bool:
        return bool(self.notifications.slack_token and self.notifications.slack_channel)

    def pipeline_config(self, *, dry_run: bool = False) -> PipelineConfig:
        return PipelineConfig(
            steps=Steps(
                touch=self.steps.touch,
                scrub=self.steps.scrub,
                smart=self.steps.smart,
            ),
            dry_run=dry_run,
            scrub_plan=self.scrub.plan,
            scrub_older_than=self.scrub.older_than,
        )
