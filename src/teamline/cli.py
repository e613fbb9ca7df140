"""Command-line interface for Teamline."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .effort import COMPLEXITY_LABELS, GAP_LEVEL_LABELS, calculate_man_days
from .exceptions import TeamlineError
from .gantt import GanttRenderer
from .logger import setup_logger
from .models import Complexity, GapLevel, PlanningData
from .parser import PlanningParser
from .progress import format_progress, progress_summary, schedule_status
from .scheduler import TimelineResult, compute_timelines
from .timescale import TimeScale
from .unified_config import UnifiedConfig, discover_config
from .writer import write_schedule_annotations

app = typer.Typer(
    name="teamline",
    help="Teamline - capacity-aware timelines for a team's use cases",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to unified config file (default: teamline_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for teamline commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    """Parse a YYYY-MM-DD date from a CLI option, exiting on bad input."""
    if date_str is None:
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} '{date_str}'. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1) from None


def _load(file: Path) -> tuple[PlanningData, UnifiedConfig]:
    """Load config and planning data, exiting with an error message on failure."""
    try:
        config = discover_config(file) or UnifiedConfig()
        planning = PlanningParser(config.effort).parse_file(file)
    except (TeamlineError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    return planning, config


def _calculate(planning: PlanningData, config: UnifiedConfig) -> TimelineResult:
    return compute_timelines(planning.use_cases, planning.developers, config.scheduler)


def _echo_warnings(result: TimelineResult) -> None:
    if result.warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in result.warnings:
            typer.echo(f"  - {warning}", err=True)


def _display_schedule_results(planning: PlanningData, result: TimelineResult) -> None:
    """Display timelines, conflicts and convergence status to stdout."""
    typer.echo("Schedule Results")
    typer.echo("=" * 80)
    typer.echo("")

    for use_case in planning.use_cases:
        timeline = result.get(use_case.id)
        if timeline is None:
            continue

        typer.echo(f"{use_case.title} ({use_case.id})")
        typer.echo(f"  Start:     {timeline.start_date}")
        typer.echo(f"  End:       {timeline.end_date}")
        typer.echo(
            f"  Duration:  {timeline.duration} working days "
            f"({timeline.calendar_days} calendar days)"
        )
        typer.echo(f"  Effort:    {timeline.man_days:g} man-days")
        typer.echo(f"  Velocity:  {timeline.average_velocity:.2f} man-days/day")
        typer.echo(f"  Developers: {', '.join(timeline.developer_ids)}")
        if len(timeline.segments) > 1:
            typer.echo("  Segments:")
            for segment in timeline.segments:
                shared = (
                    f" shared with {', '.join(segment.concurrent_item_ids)}"
                    if segment.concurrent_item_ids
                    else ""
                )
                typer.echo(
                    f"    {segment.start_date} - {segment.end_date}: "
                    f"velocity {segment.velocity:.2f}{shared}"
                )
        typer.echo("")

    unscheduled = [uc.id for uc in planning.use_cases if result.get(uc.id) is None]
    if unscheduled:
        typer.echo(f"Not scheduled: {', '.join(unscheduled)}")
        typer.echo("")

    if result.conflicts:
        typer.echo("Capacity Conflicts")
        typer.echo("-" * 80)
        for conflict in result.conflicts:
            typer.echo(
                f"  {', '.join(conflict.item_ids)} overlap on "
                f"{', '.join(conflict.developer_ids)} "
                f"({conflict.start_date} - {conflict.end_date})"
            )
        typer.echo("")

    if result.converged:
        typer.echo(f"Converged after {result.iterations} iteration(s)")
    else:
        typer.echo(f"Did not converge after {result.iterations} iteration(s)")


def _export_schedule_csv(planning: PlanningData, result: TimelineResult, output_path: Path) -> None:
    """Export computed timelines to CSV."""
    conflicting = {item_id for conflict in result.conflicts for item_id in conflict.item_ids}
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "use_case_id",
                "title",
                "start_date",
                "end_date",
                "working_days",
                "man_days",
                "developers",
                "conflict",
            ]
        )

        for use_case in planning.use_cases:
            timeline = result.get(use_case.id)
            if timeline is None:
                continue
            writer.writerow(
                [
                    use_case.id,
                    use_case.title,
                    timeline.start_date.isoformat(),
                    timeline.end_date.isoformat(),
                    timeline.duration,
                    f"{timeline.man_days:g}",
                    ";".join(timeline.developer_ids),
                    "yes" if use_case.id in conflicting else "no",
                ]
            )


@app.command()
def schedule(
    file: Annotated[Path, typer.Argument(help="Path to the planning YAML file")] = Path(
        "planning.yaml"
    ),
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", help="Export timelines to a CSV file"),
    ] = None,
    annotate_yaml: Annotated[
        bool,
        typer.Option(
            "--annotate-yaml",
            help="Write estimated_start/estimated_end back to the YAML file",
        ),
    ] = False,
) -> None:
    """Compute capacity-aware timelines and report conflicts."""
    planning, config = _load(file)
    result = _calculate(planning, config)

    if output_csv:
        _export_schedule_csv(planning, result, output_csv)
        typer.echo(f"Schedule exported to {output_csv}")
    elif annotate_yaml:
        try:
            count = write_schedule_annotations(file, result)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None
        typer.echo(f"Annotated {count} use case(s) in {file}")
    else:
        _display_schedule_results(planning, result)

    _echo_warnings(result)


def _format_gantt_output(mermaid_output: str, output_path: Path | None) -> None:
    """Output or write Gantt chart result."""
    if output_path:
        # Wrap in markdown code fence if output is a .md file
        if output_path.suffix.lower() == ".md":
            output_content = f"```mermaid\n{mermaid_output}\n```\n"
        else:
            output_content = mermaid_output
        output_path.write_text(output_content, encoding="utf-8")
        typer.echo(f"Gantt chart written to {output_path}")
    else:
        typer.echo(mermaid_output)


@app.command()
def gantt(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the planning YAML file")] = Path(
        "planning.yaml"
    ),
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output file (.md wraps in a fence)")
    ] = None,
    title: Annotated[str | None, typer.Option("--title", help="Chart title")] = None,
    scale: Annotated[
        TimeScale | None,
        typer.Option("--scale", help="Time scale for the axis (default: automatic)"),
    ] = None,
    group_by_developer: Annotated[
        bool,
        typer.Option("--group-by-developer", help="One chart section per developer"),
    ] = False,
    current_date: Annotated[
        str | None,
        typer.Option("--current-date", help="Date for the today marker (YYYY-MM-DD)"),
    ] = None,
) -> None:
    """Generate a Mermaid Gantt chart of computed timelines."""
    parsed_current_date = _parse_date_option(current_date, "current-date")
    planning, config = _load(file)
    result = _calculate(planning, config)

    try:
        renderer = GanttRenderer(planning, result, config.gantt, current_date=parsed_current_date)
    except TeamlineError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    mermaid_output = renderer.generate_mermaid(
        title=title,
        scale=scale,
        group_by_developer=group_by_developer or None,
    )
    _format_gantt_output(mermaid_output, output)
    _echo_warnings(result)


@app.command()
def progress(
    file: Annotated[Path, typer.Argument(help="Path to the planning YAML file")] = Path(
        "planning.yaml"
    ),
    as_of: Annotated[
        str | None,
        typer.Option("--as-of", help="Date to evaluate progress on (YYYY-MM-DD). Defaults to today"),
    ] = None,
) -> None:
    """Report actual vs. expected progress of every use case."""
    evaluation_date = _parse_date_option(as_of, "as-of") or date.today()  # noqa: DTZ011
    planning, config = _load(file)
    result = _calculate(planning, config)
    thresholds = config.progress

    end_dates = {t.item_id: t.end_date for t in result.timelines}

    typer.echo(f"Progress as of {evaluation_date}")
    typer.echo("=" * 80)
    for use_case in planning.use_cases:
        status = schedule_status(use_case, end_dates.get(use_case.id), evaluation_date, thresholds)
        typer.echo(
            f"  {use_case.id:<20} {format_progress(use_case.progress_percent):>5}  {status.value}"
        )

    summary = progress_summary(planning.use_cases, end_dates, evaluation_date, thresholds)
    typer.echo("")
    typer.echo(
        f"Total: {summary.total}  Completed: {summary.completed}  Ahead: {summary.ahead}  "
        f"On track: {summary.on_track}  Behind: {summary.behind}  At risk: {summary.at_risk}  "
        f"Not started: {summary.not_started}"
    )
    typer.echo(f"Average progress: {summary.average_progress}%")
    if summary.stale_updates:
        typer.echo(f"Stale progress updates: {summary.stale_updates}", err=True)


@app.command()
def effort(
    complexity: Annotated[Complexity, typer.Argument(help="Use case complexity")],
    gap: Annotated[GapLevel, typer.Argument(help="Gap to what the SDK provides")],
) -> None:
    """Estimate man-days from complexity and gap level."""
    config = discover_config() or UnifiedConfig()
    man_days = calculate_man_days(complexity, gap, config.effort)
    typer.echo(
        f"{COMPLEXITY_LABELS[complexity]} / {GAP_LEVEL_LABELS[gap]}: {man_days:g} man-days"
    )


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
