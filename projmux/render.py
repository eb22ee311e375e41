"""
Rendering functions for projmux output.

This module handles all pretty-printing for the terminal.
Services return data, this module makes it human-readable.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box
from typing import Iterable, List, Optional, Tuple

console = Console()
err_console = Console(stderr=True)


def render_error(message: str) -> None:
    """Print an error message in red on stderr."""
    err_console.print(f"[red]{escape(message)}[/red]")


def render_report(report) -> None:
    """
    Render a filesystem vs. config report.

    Args:
        report: ProjectReport from ProjectService.report()
    """
    table = Table(
        title="Project Report",
        box=box.ROUNDED,
        show_header=False,
    )
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("Projects directory", escape(str(report.projects_directory)))
    table.add_row("File system", str(len(report.fs_projects)))
    table.add_row("Config", str(len(report.config_projects)))
    table.add_row("Not tracked", str(len(report.untracked)))
    table.add_row("Ignored", str(len(report.ignored)))
    console.print(table)

    if report.untracked:
        console.print("\n[bold yellow]Not tracked:[/bold yellow]")
        for project in report.untracked:
            console.print(f"  {escape(project.name)} [dim]({escape(project.remote)})[/dim]")

    if report.ignored:
        console.print("\n[bold]Ignored (no parsable origin remote):[/bold]")
        for path in report.ignored:
            console.print(f"  [dim]{escape(str(path))}[/dim]")


def render_diff(lines: Iterable[Tuple[str, str]], title: Optional[str] = None) -> None:
    """
    Render a line diff: removals red, additions green, context plain.

    Args:
        lines: (sign, text) pairs as produced by ConfigChange.diff_lines()
        title: Optional heading, usually the file being changed
    """
    if title:
        console.print(f"[bold]{escape(title)}[/bold]")
    for sign, text in lines:
        if sign == '-':
            console.print(f"[red]-{escape(text)}[/red]", highlight=False)
        elif sign == '+':
            console.print(f"[green]+{escape(text)}[/green]", highlight=False)
        else:
            console.print(f" {escape(text)}", highlight=False)


def render_tags(tags: List[str]) -> None:
    """Print one tag per line."""
    if not tags:
        console.print("[yellow]No tags found.[/yellow]")
        return
    for tag in tags:
        console.print(escape(tag), highlight=False)


def render_killed(sessions: List[str]) -> None:
    if not sessions:
        console.print("[yellow]No sessions killed.[/yellow]")
        return
    for session in sessions:
        console.print(f"[green]Killed[/green] {escape(session)}")
