"""Data models for a single supervised snapraid run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple


class Category(str, Enum):
    """Change categories reported by ``snapraid diff``, in gate order."""

    ADDED = "added"
    REMOVED = "removed"
    UPDATED = "updated"
    MOVED = "moved"
    COPIED = "copied"
    RESTORED = "restored"


# diff action token -> category
ACTIONS: Dict[str, Category] = {
    "add": Category.ADDED,
    "remove": Category.REMOVED,
    "update": Category.UPDATED,
    "move": Category.MOVED,
    "copy": Category.COPIED,
    "restore": Category.RESTORED,
}

DISABLED = -1


@dataclass(frozen=True)
class ChangeSet:
    """Parsed output of one ``snapraid diff`` invocation.

    Paths are kept exactly as snapraid printed them, escapes included.
    """

    equal: int = 0
    added: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()
    updated: Tuple[str, ...] = ()
    moved: Tuple[str, ...] = ()
    copied: Tuple[str, ...] = ()
    restored: Tuple[str, ...] = ()

    def paths(self, category: Category) -> Tuple[str, ...]:
        return getattr(self, category.value)

    def counts(self) -> Dict[Category, int]:
        return {c: len(self.paths(c)) for c in Category}

    @property
    def has_changes(self) -> bool:
        return any(self.paths(c) for c in Category)

    @property
    def total_changes(self) -> int:
        return sum(self.counts().values())


@dataclass(frozen=True)
class ThresholdSet:
    """Per-category change limits. A negative limit disables the check."""

    add: int = DISABLED
    remove: int = DISABLED
    update: int = DISABLED
    move: int = DISABLED
    copy: int = DISABLED
    restore: int = DISABLED

    @classmethod
    def unlimited(cls) -> "ThresholdSet":
        return cls()

    def limit_for(self, category: Category) -> int:
        return {
            Category.ADDED: self.add,
            Category.REMOVED: self.remove,
            Category.UPDATED: self.update,
            Category.MOVED: self.move,
            Category.COPIED: self.copy,
            Category.RESTORED: self.restore,
        }[category]


@dataclass
class StepTiming:
    """Wall-clock seconds spent in each step. Zero means the step never ran."""

    touch: float = 0.0
    diff: float = 0.0
    sync: float = 0.0
    scrub: float = 0.0
    smart: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class Steps:
    """Optional steps around the mandatory diff/sync pair."""

    touch: bool = False
    scrub: bool = False
    smart: bool = False


@dataclass(frozen=True)
class PipelineConfig:
    steps: Steps = field(default_factory=Steps)
    dry_run: bool = False
    scrub_plan: int = 22  # percent of the array per scrub
    scrub_older_than: int = 12  # days


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunOutcome:
    """Everything a run produced. Built by the pipeline, read by reporters."""

    timestamp: datetime = field(default_factory=_utcnow)
    changes: ChangeSet = field(default_factory=ChangeSet)
    timings: StepTiming = field(default_factory=StepTiming)
    error: Optional[Exception] = None

    @property
    def has_changes(self) -> bool:
        return self.changes.has_changes

    @property
    def ok(self) -> bool:
        return self.error is None
