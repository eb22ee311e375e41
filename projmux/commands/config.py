import json

import click
import yaml

from ..cli_utils import standard_command


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of YAML")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.pass_obj
@standard_command()
def show_config(app, pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs YAML in the same shape as the config file.
    Use --pretty for formatted JSON.
    Use --path to see which config file is being used.
    """
    from ..config import get_config_path

    if path:
        config_path = app.config_path or get_config_path(app.env)
        click.echo(json.dumps({"config_path": str(config_path)}))
        return

    config = app.config

    if pretty:
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        click.echo(yaml.safe_dump(config, default_flow_style=False, sort_keys=False).rstrip('\n'))
