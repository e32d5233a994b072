"""snapraid-runner CLI — Typer application with run, init, and show commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from snapraid_runner import __version__
from snapraid_runner.config.defaults import DEFAULT_CONFIG_NAME

app = typer.Typer(
    name="snapraid-runner",
    help="Supervise unattended SnapRAID maintenance runs.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_CATEGORIES = ("add", "remove", "update", "copy", "move", "restore")


# ── run ───────────────────────────────────────────────────────────────────────


@app.command()
def run(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to snapraid-runner.yml"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run diff only; never touch, sync, scrub or smart"),
    touch: bool = typer.Option(False, "--touch", help="Force the touch step on"),
    scrub: bool = typer.Option(False, "--scrub", help="Force the scrub step on"),
    smart: bool = typer.Option(False, "--smart", help="Force the smart step on"),
    no_threshold: Optional[List[str]] = typer.Option(
        None, "--no-threshold", help="Disable a threshold: add | remove | update | copy | move | restore",
    ),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="Directory for JSON result files"),
    no_notify: bool = typer.Option(False, "--no-notify", help="Do not send a Slack notification"),
    log_format: str = typer.Option("console", "--log-format", help="Log format: console | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run touch → diff → sync → scrub → smart, stopping on the first failure."""
    from snapraid_runner.config.loader import apply_overrides, load_config, validate
    from snapraid_runner.errors import ConfigError, NotifyError, ReportError
    from snapraid_runner.logging import configure_logging, get_logger
    from snapraid_runner.output import json_report, slack, terminal
    from snapraid_runner.pipeline.runner import PipelineRunner
    from snapraid_runner.snapraid.adapter import SnapraidExecutor

    if log_format not in ("console", "json"):
        console.print(f"[bold red]Invalid log format:[/bold red] {log_format}")
        raise typer.Exit(code=EXIT_USAGE)
    no_threshold = no_threshold or []
    for name in no_threshold:
        if name not in _CATEGORIES:
            console.print(f"[bold red]Unknown threshold:[/bold red] {name}")
            raise typer.Exit(code=EXIT_USAGE)

    configure_logging("DEBUG" if verbose else "INFO", log_format)  # type: ignore[arg-type]
    logger = get_logger("snapraid_runner")
    logger.info("Starting snapraid runner", version=__version__, tag="runner")

    # --- Load config ---
    try:
        cfg = load_config(config)
        apply_overrides(
            cfg,
            dry_run=dry_run,
            touch=touch,
            scrub=scrub,
            smart=smart,
            disable_thresholds=no_threshold,
            output_dir=output_dir,
            no_notify=no_notify,
        )
        validate(cfg)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_USAGE) from exc

    # --- Run pipeline ---
    pipeline = cfg.pipeline_config(dry_run=dry_run)
    executor = SnapraidExecutor(
        cfg.snapraid_bin,
        cfg.snapraid_config,
        logger,
        scrub_plan=pipeline.scrub_plan,
        scrub_older_than=pipeline.scrub_older_than,
    )
    runner = PipelineRunner(
        executor,
        pipeline,
        cfg.thresholds.to_threshold_set(),
        logger,
    )
    outcome = runner.run()

    if outcome.has_changes:
        counts = {c.value: n for c, n in outcome.changes.counts().items()}
        logger.info("Changes detected", equal=outcome.changes.equal, **counts, tag="runner")
    else:
        logger.info("No changes detected", tag="runner")

    report = json_report.to_dict(outcome)
    terminal.render(report, dry_run=dry_run, console=console)

    # --- Persist ---
    if cfg.output_dir:
        try:
            path = json_report.write_report(outcome, cfg.output_dir)
            logger.info("Result written", path=str(path), tag="runner")
        except ReportError as exc:
            logger.warning("Failed to write result file", error=str(exc), tag="runner")

    # --- Notify ---
    if cfg.wants_slack():
        try:
            slack.notify(
                outcome,
                cfg.notifications.slack_token,
                cfg.notifications.slack_channel,
                dry_run=dry_run,
                web=cfg.notifications.web,
            )
            logger.info("Slack notification sent", tag="runner")
        except NotifyError as exc:
            logger.error("Slack notification failed", error=str(exc), tag="runner")

    # --- Exit code ---
    if outcome.error is not None:
        logger.error("SnapRAID run failed", error=str(outcome.error), tag="runner")
        raise typer.Exit(code=EXIT_FAILED)

    logger.info("All done", tag="runner")
    raise typer.Exit(code=EXIT_OK)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    path: str = typer.Argument(DEFAULT_CONFIG_NAME, help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Generate a starter snapraid-runner.yml."""
    from snapraid_runner.config.defaults import DEFAULT_YAML

    config_path = Path(path)
    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {config_path} already exists (use --force to overwrite)")
        raise typer.Exit(code=EXIT_FAILED)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_YAML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    path: str = typer.Argument(..., help="Result file written by 'run'"),
    raw: bool = typer.Option(False, "--json", help="Print the raw JSON instead of a table"),
) -> None:
    """Display a persisted run result."""
    import json

    from snapraid_runner.errors import ReportError
    from snapraid_runner.output import json_report, terminal

    try:
        report = json_report.load_report(path)
    except ReportError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_USAGE) from exc

    if raw:
        print(json.dumps(report, indent=2))
    else:
        terminal.render(report, console=console)
    if report.get("error"):
        raise typer.Exit(code=EXIT_FAILED)


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"snapraid-runner {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """snapraid-runner — fail-closed SnapRAID maintenance."""
