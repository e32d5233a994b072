"""Parser for the plain-text report printed by ``snapraid diff``.

Two line shapes matter::

    add photos/2024/img\\ 001.jpg
    1234 equal

Itemised lines are appended to their category in the order snapraid printed
them.  Of the summary lines only ``equal`` is used; the other totals
(``12 added`` etc.) are recomputed from the itemised list so the counts can
never drift from the paths.  Banners, progress output and anything else
unknown are skipped.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from snapraid_runner.snapraid.models import ACTIONS, Category, ChangeSet


def _equal_count(line: str) -> int | None:
    """Return N for an ``N equal`` summary line, else None."""
    parts = line.split()
    if len(parts) != 2 or parts[1].lower() != "equal":
        return None
    digits = parts[0][1:] if parts[0].startswith("+") else parts[0]
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits)


def parse_diff(lines: Iterable[str]) -> ChangeSet:
    """Build a ChangeSet from raw diff output lines. Never raises."""
    equal = 0
    found: Dict[Category, List[str]] = {c: [] for c in Category}

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        count = _equal_count(line)
        if count is not None:
            equal += count
            continue

        action, sep, rest = line.partition(" ")
        if not sep:
            continue
        category = ACTIONS.get(action.lower())
        if category is None:
            continue
        found[category].append(rest.strip())

    return ChangeSet(
        equal=equal,
        added=tuple(found[Category.ADDED]),
        removed=tuple(found[Category.REMOVED]),
        updated=tuple(found[Category.UPDATED]),
        moved=tuple(found[Category.MOVED]),
        copied=tuple(found[Category.COPIED]),
        restored=tuple(found[Category.RESTORED]),
    )
