"""
Project commands: list, list-tags, report, import, new.
"""

import logging

import click

from ..cli_utils import add_common_options, parse_tags, standard_command
from ..exit_codes import ConfirmationDeclinedError
from ..format_utils import PROJECT_CSV_FIELDS
from ..render import console, render_diff, render_report, render_tags

logger = logging.getLogger(__name__)


def _confirm_and_apply(service, change, yes):
    """Show the diff of a planned rewrite and write it once accepted."""
    render_diff(change.diff_lines(), title=str(change.path))
    if not yes:
        try:
            accepted = click.confirm("Write these changes?", default=False)
        except click.Abort:
            accepted = False
        if not accepted:
            console.print("[yellow]projects file will not be updated.[/yellow]")
            raise ConfirmationDeclinedError()
    service.apply(change)
    console.print(f"[green]Updated[/green] {change.path}")


@click.command("list")
@add_common_options('projects_config', 'tags', 'output')
@click.pass_obj
@standard_command(formatted=True, fields=PROJECT_CSV_FIELDS)
def list_cmd(app, projects_config, tags, output_format):
    """List the resolved projects.

    Without --output, prints one project name per line.

    \b
    Examples:
        projmux list
        projmux list -t work -o csv
        projmux list -o json | jq '.[].path'
    """
    service = app.project_service()
    directory = service.load(app.projects_config(projects_config), parse_tags(tags))
    projects = directory.get_projects_from_remotes()

    if output_format is None:
        for project in projects:
            click.echo(project.name)
        return None
    return projects


@click.command("list-tags")
@add_common_options('projects_config', 'output')
@click.pass_obj
@standard_command(formatted=True)
def list_tags_cmd(app, projects_config, output_format):
    """List every tag used in the project tree."""
    service = app.project_service()
    directory = service.load(app.projects_config(projects_config))
    tags = directory.all_tags()

    if output_format is None:
        render_tags(tags)
        return None
    return [{'tag': tag} for tag in tags]


@click.command("report")
@add_common_options('projects_config', 'tags', 'output')
@click.pass_obj
@standard_command(formatted=True)
def report_cmd(app, projects_config, tags, output_format):
    """Compare the projects directory on disk with the config."""
    service = app.project_service()
    directory = service.load(app.projects_config(projects_config), parse_tags(tags))
    report = service.report(directory)

    if output_format is None:
        render_report(report)
        return None
    return [report]


@click.command("import")
@click.option('-d', '--directory', type=click.Path(file_okay=False),
              help='Directory to scan (default: the projects directory)')
@add_common_options('projects_config', 'yes')
@click.pass_obj
@standard_command()
def import_cmd(app, directory, projects_config, yes):
    """Add untracked checkouts to the root project file.

    Scans DIRECTORY for git checkouts whose origin is not in the config,
    lets you pick which to add, and shows the rewritten file before saving.
    """
    service = app.project_service()
    config_path = app.projects_config(projects_config)
    resolved = service.load(config_path)

    candidates = service.import_candidates(resolved, directory)
    picked = service.pick_projects(candidates)
    logger.info(f"importing {len(picked)} project(s)")

    change = service.plan_add(config_path, picked)
    _confirm_and_apply(service, change, yes)


@click.command("new")
@click.argument('remote')
@click.option('--init', is_flag=True,
              help='Create an empty repository with REMOTE as origin instead of cloning')
@add_common_options('projects_config', 'yes')
@click.pass_obj
@standard_command()
def new_cmd(app, remote, init, projects_config, yes):
    """Check out REMOTE into the projects directory and track it.

    \b
    Examples:
        projmux new git@github.com:me/tool.git
        projmux new https://github.com/me/idea --init
    """
    service = app.project_service()
    config_path = app.projects_config(projects_config)
    resolved = service.load(config_path)

    project, ok = service.new_project(resolved, remote, init=init)
    if not ok:
        console.print(f"[red]Checkout of {remote} failed; it can still be added to the config.[/red]")

    change = service.plan_add(config_path, [project])
    _confirm_and_apply(service, change, yes)
