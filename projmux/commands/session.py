"""
Session commands: open, scratch, kill, home.
"""

import click

from ..cli_utils import add_common_options, parse_tags, standard_command
from ..render import console, render_error, render_killed


@click.command("open")
@add_common_options('projects_config', 'tags', 'multiplexer')
@click.pass_obj
@standard_command()
def open_cmd(app, projects_config, tags, multiplexer):
    """Pick a project and open (or switch to) its session.

    \b
    Examples:
        projmux open
        projmux open -t work,oss
    """
    project_service = app.project_service()
    directory = project_service.load(app.projects_config(projects_config), parse_tags(tags))
    project = project_service.pick_project(directory.get_projects_from_remotes())

    error = app.session_service(multiplexer).open_project(project)
    if error is not None:
        render_error(str(error))


@click.command("scratch")
@click.option('-n', '--name', help='Session name (default: scratch, or the zoxide directory name)')
@click.option('-d', '--dir', 'directory', type=click.Path(file_okay=False),
              help='Directory to open in (default: home)')
@click.option('-z', '--zoxide', 'zoxide_query', metavar='QUERY',
              help='Find the directory with zoxide')
@click.option('-i', '--interactive', is_flag=True,
              help='Pick the directory interactively with zoxide')
@add_common_options('multiplexer')
@click.pass_obj
@standard_command()
def scratch_cmd(app, name, directory, zoxide_query, interactive, multiplexer):
    """Open a session that is not tied to a project."""
    if directory and (zoxide_query is not None or interactive):
        raise click.UsageError("--dir cannot be combined with --zoxide or --interactive")

    error = app.session_service(multiplexer).scratch(
        name=name,
        directory=directory,
        zoxide_query=zoxide_query,
        interactive=interactive,
    )
    if error is not None:
        render_error(str(error))


@click.command("kill")
@add_common_options('multiplexer')
@click.pass_obj
@standard_command()
def kill_cmd(app, multiplexer):
    """Pick running sessions and kill them."""
    killed = app.session_service(multiplexer).kill()
    render_killed(killed)


@click.command("home")
@add_common_options('multiplexer')
@click.pass_obj
@standard_command()
def home_cmd(app, multiplexer):
    """Open a numbered session (0-9) in the home directory."""
    name = app.session_service(multiplexer).home_session()
    if name is None:
        console.print("[yellow]All home sessions (0-9) are already open.[/yellow]")
