"""Rich terminal summary of a run."""

from __future__ import annotations

from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from snapraid_runner.snapraid.models import Category

_STEPS = ("touch", "diff", "sync", "scrub", "smart")


def render(
    report: Dict[str, Any],
    *,
    dry_run: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Print a result dict (see ``json_report.to_dict``) using Rich."""
    console = console or Console(stderr=True)
    result = report.get("result", {})
    timings = report.get("timings", {})

    console.print()
    table = Table(
        title=f"snapraid run {report.get('timestamp', '')}",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Category", style="cyan")
    table.add_column("Files", justify="right", style="green")
    table.add_row("equal", str(result.get("equal", 0)))
    for category in Category:
        count = len(result.get(f"{category.value}_files", []))
        table.add_row(category.value, f"[bold]{count}[/bold]" if count else "0")
    console.print(table)

    console.print()
    for step in _STEPS:
        seconds = timings.get(step, 0)
        if seconds:
            console.print(f"[dim]{step.capitalize() + ':':<8}[/dim] {seconds:.1f}s")
    console.print(f"[dim]Total:[/dim]    {timings.get('total', 0):.1f}s")

    console.print()
    error = report.get("error")
    if error:
        console.print(f"[bold red]❌ FAILED — {escape(str(error))}[/bold red]")
    elif dry_run:
        console.print("[bold yellow]Dry run — nothing was synced.[/bold yellow]")
    else:
        console.print("[bold green]✅ Run completed.[/bold green]")
