"""
VantageFlow CLI entry point.
"""

import click

from vantageflow.cli.config import config
from vantageflow.cli.ingest import parse_command
from vantageflow.cli.utils import setup_logging
from vantageflow.config.app import load_config


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """VantageFlow - turn pasted project notes into structured plans."""
    ctx.ensure_object(dict)
    try:
        app_config = load_config(config_file)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(verbose, app_config.logging.level)
    ctx.obj["config"] = app_config
    ctx.obj["config_file"] = config_file


cli.add_command(parse_command)
cli.add_command(config)
