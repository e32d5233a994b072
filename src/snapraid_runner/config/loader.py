"""Load, validate and override configuration from YAML, env vars and CLI flags."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from snapraid_runner.config.schema import (
    NotifyConfig,
    RunnerConfig,
    ScrubConfig,
    StepsConfig,
    ThresholdsConfig,
)
from snapraid_runner.errors import ConfigError

_ENV_PREFIX = "SNAPRAID_RUNNER_"

_SECTIONS = {
    "thresholds": ThresholdsConfig,
    "steps": StepsConfig,
    "scrub": ScrubConfig,
    "notifications": NotifyConfig,
}


def _parse_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a YAML section, ignoring unknown keys."""
    raw = data.get(section) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{section}' must be a mapping")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _merge_env_overrides(cfg: RunnerConfig) -> None:
    """Apply SNAPRAID_RUNNER_* environment variable overrides."""
    if val := os.environ.get(_ENV_PREFIX + "SLACK_TOKEN"):
        cfg.notifications.slack_token = val
    if val := os.environ.get(_ENV_PREFIX + "SLACK_CHANNEL"):
        cfg.notifications.slack_channel = val
    if val := os.environ.get(_ENV_PREFIX + "OUTPUT_DIR"):
        cfg.output_dir = val


def load_config(path: Optional[str | Path]) -> RunnerConfig:
    """Load *path* (or pure defaults when None) and apply env overrides."""
    if path is None:
        cfg = RunnerConfig()
    else:
        p = Path(path)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p}")
        raw = _parse_yaml(p)
        top = {
            f.name: raw[f.name]
            for f in dataclasses.fields(RunnerConfig)
            if f.name not in _SECTIONS and raw.get(f.name) is not None
        }
        sections = {name: _build_section(raw, cls, name) for name, cls in _SECTIONS.items()}
        cfg = RunnerConfig(**top, **sections)

    _merge_env_overrides(cfg)
    return cfg


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate(cfg: RunnerConfig, *, check_paths: bool = True) -> None:
    """Raise ConfigError on the first invalid setting."""
    for name in ("snapraid_bin", "snapraid_config", "output_dir"):
        if not isinstance(getattr(cfg, name), str):
            raise ConfigError(f"{name} must be a string")
    for f in dataclasses.fields(NotifyConfig):
        if not isinstance(getattr(cfg.notifications, f.name), str):
            raise ConfigError(f"notifications.{f.name} must be a string")

    if not cfg.snapraid_bin:
        raise ConfigError("snapraid_bin must be set")
    if not cfg.snapraid_config:
        raise ConfigError("snapraid_config must be set")
    if check_paths:
        if not Path(cfg.snapraid_bin).is_file():
            raise ConfigError(f"snapraid_bin not found: {cfg.snapraid_bin}")
        if not Path(cfg.snapraid_config).is_file():
            raise ConfigError(f"snapraid_config not found: {cfg.snapraid_config}")

    for f in dataclasses.fields(ThresholdsConfig):
        if not _is_int(getattr(cfg.thresholds, f.name)):
            raise ConfigError(f"thresholds.{f.name} must be an integer")
    for f in dataclasses.fields(StepsConfig):
        if not isinstance(getattr(cfg.steps, f.name), bool):
            raise ConfigError(f"steps.{f.name} must be true or false")

    if not _is_int(cfg.scrub.plan) or not 0 <= cfg.scrub.plan <= 100:
        raise ConfigError("scrub.plan must be between 0 and 100")
    if not _is_int(cfg.scrub.older_than) or cfg.scrub.older_than < 0:
        raise ConfigError("scrub.older_than must be >= 0")


def apply_overrides(
    cfg: RunnerConfig,
    *,
    dry_run: bool = False,
    touch: bool = False,
    scrub: bool = False,
    smart: bool = False,
    disable_thresholds: Iterable[str] = (),
    output_dir: Optional[str] = None,
    no_notify: bool = False,
) -> None:
    """Layer command-line flags on top of a loaded config, in place."""
    if touch:
        cfg.steps.touch = True
    if scrub:
        cfg.steps.scrub = True
    if smart:
        cfg.steps.smart = True
    if dry_run:
        # a trial run must leave the array untouched
        cfg.steps.touch = False
        cfg.steps.scrub = False
        cfg.steps.smart = False

    valid = {f.name for f in dataclasses.fields(ThresholdsConfig)}
    for name in disable_thresholds:
        if name not in valid:
            raise ConfigError(f"Unknown threshold: {name}")
        setattr(cfg.thresholds, name, -1)

    if output_dir:
        cfg.output_dir = output_dir
    if no_notify:
        cfg.notifications.slack_token = ""
        cfg.notifications.slack_channel = ""
