"""
Handles the 'config' command group.
"""

import json
from pathlib import Path

import click

from ..config import get_config_path, get_default_config, load_config, save_config


@click.group("config")
def config_cmd():
    """Show or create configuration."""
    pass


@config_cmd.command("show")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False), help="Configuration file")
def show_config(config_path):
    """Print the effective configuration as JSON."""
    click.echo(json.dumps(load_config(config_path), indent=2))


@config_cmd.command("path")
def config_path_cmd():
    """Print the configuration file location."""
    click.echo(str(get_config_path()))


@config_cmd.command("init")
@click.option("--format", "fmt", type=click.Choice(["json", "toml", "yaml"]), default="json",
              help="File format")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Where to write (default: ~/.repoprov/)")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(fmt, output, force):
    """Write the default configuration to a file."""
    path = Path(output) if output else Path.home() / ".repoprov" / f"config.{fmt}"
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")
    try:
        written = save_config(get_default_config(), path)
    except OSError as e:
        raise click.ClickException(f"could not write {path}: {e}")
    click.echo(str(written))
