#!/usr/bin/env python3

import click
from pathlib import Path

from projmux import __version__
from projmux.cli_utils import AppContext, verbosity_to_level
from projmux.config import Environment, setup_logging
from projmux.commands.config import config_cmd
from projmux.commands.projects import (
    import_cmd,
    list_cmd,
    list_tags_cmd,
    new_cmd,
    report_cmd,
)
from projmux.commands.session import home_cmd, kill_cmd, open_cmd, scratch_cmd


@click.group()
@click.version_option(__version__)
@click.option('-v', '--verbose', count=True, help='Increase log output (-v info, -vv debug)')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
              help='App config file (default: $XDG_CONFIG_HOME/projmux/config.yaml)')
@click.pass_context
def cli(ctx, verbose, config_path):
    """projmux - Open terminal multiplexer sessions for your projects.

    Projects are declared in a root project file that includes group files;
    tags set on a group file apply to every project beneath it.
    """
    level = verbosity_to_level(verbose)
    if level is not None:
        setup_logging(level)

    env = Environment.from_env()
    ctx.obj = AppContext(
        env,
        config_path=Path(config_path).expanduser() if config_path else None,
        verbosity=verbose,
    )


# Session commands
cli.add_command(open_cmd)
cli.add_command(scratch_cmd)
cli.add_command(kill_cmd)
cli.add_command(home_cmd)

# Project commands
cli.add_command(list_cmd)
cli.add_command(list_tags_cmd)
cli.add_command(report_cmd)
cli.add_command(import_cmd)
cli.add_command(new_cmd)

# Command groups
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
