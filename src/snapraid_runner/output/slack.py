"""Slack summary notifications via chat.postMessage."""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

import httpx

from snapraid_runner.errors import NotifyError
from snapraid_runner.output.json_report import format_timestamp
from snapraid_runner.snapraid.models import RunOutcome

SLACK_POST_MESSAGE_API = "https://slack.com/api/chat.postMessage"

COLOR_OK = "#2ECC71"
COLOR_FAILED = "#E74C3C"
COLOR_DRY_RUN = "#F1C40F"


def _fmt_seconds(seconds: float) -> str:
    whole = int(seconds)
    h, rem = divmod(whole, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}h{m}m{s}s"
    if m:
        return f"{m}m{s}s"
    return f"{s}s"


def run_link(web: str, outcome: RunOutcome) -> str:
    """Deep link to this run in the result viewer."""
    return f"{web.rstrip('/')}/#/run/{quote(format_timestamp(outcome), safe='')}"


def build_summary(outcome: RunOutcome, *, dry_run: bool = False, web: str = "") -> str:
    """Format the Slack message body (mrkdwn)."""
    title = "SnapRAID dry run" if dry_run else "SnapRAID run"
    stamp = outcome.timestamp.strftime("%Y-%m-%d %H:%M")
    lines: List[str] = [f"*{title}* ({stamp} UTC)"]
    if outcome.error is not None:
        lines.append(f"*Failed:* {outcome.error}")

    lines.append("")
    lines.append(f"• Equal: {outcome.changes.equal}")
    for category, count in outcome.changes.counts().items():
        lines.append(f"• {category.value.capitalize()}: {count}")

    t = outcome.timings
    timing_lines = [
        f"• {name.capitalize()}: {_fmt_seconds(value)}"
        for name, value in (
            ("touch", t.touch),
            ("diff", t.diff),
            ("sync", t.sync),
            ("scrub", t.scrub),
            ("smart", t.smart),
            ("total", t.total),
        )
        if value > 0
    ]
    if timing_lines:
        lines.append("")
        lines.append("Timings:")
        lines.extend(timing_lines)

    if web:
        lines.append("")
        lines.append(f"<{run_link(web, outcome)}|Details>")
    return "\n".join(lines)


def summary_color(outcome: RunOutcome, *, dry_run: bool = False) -> str:
    if outcome.error is not None:
        return COLOR_FAILED
    return COLOR_DRY_RUN if dry_run else COLOR_OK


def send_summary(
    token: str,
    channel: str,
    text: str,
    color: str,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 10.0,
) -> None:
    """Post *text* as a coloured attachment. Raises NotifyError on failure."""
    payload = {
        "channel": "#" + channel.lstrip("#"),
        "attachments": [{"color": color, "text": text, "type": "mrkdwn"}],
    }
    headers = {"Authorization": f"Bearer {token}"}

    own_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        resp = http.post(SLACK_POST_MESSAGE_API, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        raise NotifyError(f"Slack request failed: {exc}") from exc
    finally:
        if own_client:
            http.close()

    if resp.status_code != 200:
        raise NotifyError(f"Slack API returned HTTP {resp.status_code}")
    try:
        body = resp.json()
    except ValueError as exc:
        raise NotifyError("Slack API returned a non-JSON response") from exc
    if not body.get("ok", False):
        raise NotifyError(f"Slack API error: {body.get('error', 'unknown')}")


def notify(
    outcome: RunOutcome,
    token: str,
    channel: str,
    *,
    dry_run: bool = False,
    web: str = "",
    client: Optional[httpx.Client] = None,
) -> None:
    """Build and send the run summary."""
    send_summary(
        token,
        channel,
        build_summary(outcome, dry_run=dry_run, web=web),
        summary_color(outcome, dry_run=dry_run),
        client=client,
    )
