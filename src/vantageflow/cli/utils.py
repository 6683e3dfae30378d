"""
Shared utilities for CLI commands.
"""

import logging

import click

from vantageflow.ingest.models import ParseResult, Task

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(verbose: bool = False, level: str = "warning") -> None:
    """
    Configure logging for CLI.

    Args:
        verbose: If True, enable DEBUG level logging
        level: Configured level name used when not verbose
    """
    log_level = logging.DEBUG if verbose else LOG_LEVELS.get(level, logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _format_task(task: Task, indent: str) -> str:
    parts = [f"{indent}- [{task.status.value}] {task.name}"]
    if task.priority is not None:
        parts.append(f"({task.priority.value})")
    if task.assignee:
        parts.append(f"@{task.assignee}")
    parts.append(f"due {task.end_date:%Y-%m-%d}")
    return " ".join(parts)


def echo_summary(result: ParseResult) -> None:
    """Print a human-readable preview of a parse result."""
    project = result.project
    report = result.metadata

    click.echo(f"Project:     {project.name or '(none)'}")
    if project.description:
        click.echo(f"Description: {project.description.splitlines()[0]}")
    if project.core_system:
        click.echo(f"Category:    {project.core_system}")
    if project.currency is not None and project.cost is not None:
        click.echo(f"Budget:      {project.currency.value} {project.cost:,.2f}")
    if project.duration is not None:
        click.echo(f"Duration:    {project.duration.value} {project.duration.unit.value}")
    if project.team:
        names = ", ".join(
            f"{m.display_name}{' (lead)' if m.lead_role else ''}" for m in project.team
        )
        click.echo(f"Team:        {names}")

    phases = project.phases or []
    click.echo(f"\nPhases ({len(phases)}):")
    for phase in phases:
        click.echo(f"  {phase.name}")
        for task in phase.tasks:
            click.echo(_format_task(task, "    "))
            for sub in task.sub_tasks:
                click.echo(_format_task(sub, "      "))

    click.echo(f"\nConfidence:  {report.confidence:.2f} ({report.source_type.value})")
    for warning in report.warnings:
        click.echo(f"  ! {warning}")
