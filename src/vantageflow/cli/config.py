"""
Configuration CLI commands.
"""

from pathlib import Path

import click
import yaml

from vantageflow.config.app import DEFAULT_CONFIG_FILE, AppConfig, generate_default_config


@click.group()
def config() -> None:
    """Inspect and initialize VantageFlow configuration."""
    pass


@config.command("show")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration as YAML."""
    app_config: AppConfig = ctx.obj["config"]
    click.echo(
        yaml.safe_dump(
            app_config.model_dump(mode="json", exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
        ).rstrip()
    )


@config.command("init")
@click.option(
    "--path",
    "config_file",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Where to write the configuration file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(config_file: str, force: bool) -> None:
    """Write a configuration file populated with defaults."""
    config_path = Path(config_file).expanduser()
    if config_path.exists() and not force:
        raise click.ClickException(
            f"Config file already exists: {config_path} (use --force to overwrite)"
        )
    try:
        generate_default_config(config_file)
    except OSError as e:
        raise click.ClickException(f"Could not write config file: {e}") from e
    click.echo(f"Wrote default configuration to {config_path}")
