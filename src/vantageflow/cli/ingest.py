"""
Text ingestion CLI command.
"""

import json
from typing import TextIO

import click

from vantageflow.cli.utils import echo_summary
from vantageflow.config.app import AppConfig, load_config
from vantageflow.ingest import ProjectTextParser, TeamMember
from vantageflow.ingest.metadata import name_from_email


@click.command("parse")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--json", "json_format", is_flag=True, help="Output as JSON")
@click.option("--user-email", help="Email of the importing user (seeded as primary lead)")
@click.option("--user-name", help="Display name of the importing user")
@click.option(
    "--currency",
    type=click.Choice(["NGN", "USD", "EUR", "GBP"], case_sensitive=False),
    help="Currency to assume when the notes name none (overrides config)",
)
@click.option("--phase-name", help="Name of the phase created for loose tasks (overrides config)")
@click.pass_context
def parse_command(
    ctx: click.Context,
    source: TextIO,
    json_format: bool,
    user_email: str | None,
    user_name: str | None,
    currency: str | None,
    phase_name: str | None,
) -> None:
    """Parse pasted project notes from SOURCE (a file, or - for stdin)."""
    app_config: AppConfig = ctx.obj["config"]
    if user_name and not user_email:
        raise click.UsageError("--user-name requires --user-email")

    overrides: dict[str, str] = {}
    if currency:
        overrides["ingestion.primary_currency"] = currency.upper()
    if phase_name:
        overrides["ingestion.default_phase_name"] = phase_name
    if overrides:
        try:
            app_config = load_config(ctx.obj["config_file"], cli_overrides=overrides)
        except ValueError as e:
            raise click.ClickException(str(e)) from e

    current_user = None
    if user_email:
        current_user = TeamMember(
            uid="current-user",
            email=user_email,
            display_name=user_name or name_from_email(user_email),
        )

    text = source.read()
    result = ProjectTextParser(app_config.ingestion).parse(text, current_user=current_user)

    if json_format:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str, ensure_ascii=False))
        return

    echo_summary(result)
