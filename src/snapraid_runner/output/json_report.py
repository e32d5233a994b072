"""JSON result files — one per run, named after the run's timestamp."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from snapraid_runner.errors import ReportError
from snapraid_runner.snapraid.models import Category, RunOutcome

_FILENAME_FMT = "%Y-%m-%dT%H-%M-%SZ"


def report_filename(outcome: RunOutcome) -> str:
    return outcome.timestamp.strftime(_FILENAME_FMT) + ".json"


def format_timestamp(outcome: RunOutcome) -> str:
    """RFC 3339 timestamp with second precision."""
    return outcome.timestamp.isoformat(timespec="seconds").replace("+00:00", "Z")


def to_dict(outcome: RunOutcome) -> Dict[str, Any]:
    """Convert a RunOutcome to a JSON-serialisable dict."""
    changes = outcome.changes
    result: Dict[str, Any] = {"equal": changes.equal}
    for category in Category:
        paths: List[str] = list(changes.paths(category))
        if paths:
            result[f"{category.value}_files"] = paths

    t = outcome.timings
    data: Dict[str, Any] = {
        "timestamp": format_timestamp(outcome),
        "result": result,
        "timings": {
            "touch": round(t.touch, 3),
            "diff": round(t.diff, 3),
            "sync": round(t.sync, 3),
            "scrub": round(t.scrub, 3),
            "smart": round(t.smart, 3),
            "total": round(t.total, 3),
        },
    }
    if outcome.error is not None:
        data["error"] = str(outcome.error)
    return data


def render(outcome: RunOutcome) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(outcome), indent=2)


def write_report(outcome: RunOutcome, directory: str | Path) -> Path:
    """Write the outcome into *directory*; returns the file path."""
    out_dir = Path(directory)
    path = out_dir / report_filename(outcome)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(render(outcome) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ReportError(f"Failed to write result file {path}: {exc}") from exc
    return path


def load_report(path: str | Path) -> Dict[str, Any]:
    """Read a result file back. Raises ReportError when unreadable."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ReportError(f"Failed to read result file {p}: {exc}") from exc
    if not isinstance(data, dict) or "timestamp" not in data:
        raise ReportError(f"{p} is not a snapraid-runner result file")
    return data
