"""snapraid-runner — fail-closed supervisor for scheduled SnapRAID maintenance."""

__version__ = "0.3.0"
