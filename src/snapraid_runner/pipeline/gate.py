"""Threshold gate — blocks sync when a change category looks anomalous."""

from __future__ import annotations

from typing import Optional

from snapraid_runner.errors import ThresholdViolation
from snapraid_runner.snapraid.models import Category, ChangeSet, ThresholdSet


def check_thresholds(changes: ChangeSet, limits: ThresholdSet) -> Optional[ThresholdViolation]:
    """Return the first category over its limit, or None.

    Categories are checked in ``Category`` order and checking stops at the
    first violation.  The violation is returned, not raised.
    """
    for category in Category:
        limit = limits.limit_for(category)
        if limit < 0:
            continue
        actual = len(changes.paths(category))
        if actual > limit:
            return ThresholdViolation(category.value, actual, limit)
    return None
