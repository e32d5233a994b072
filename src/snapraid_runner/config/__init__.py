"""Configuration loading, schema, and defaults."""

from snapraid_runner.config.loader import apply_overrides, load_config, validate
from snapraid_runner.config.schema import RunnerConfig
from snapraid_runner.errors import ConfigError

__all__ = [
    "ConfigError",
    "RunnerConfig",
    "apply_overrides",
    "load_config",
    "validate",
]
