"""
projmux - Terminal multiplexer sessions for git projects.

projmux reads a root project file that includes group files, flattens the
tree into a tag-annotated project list and opens one multiplexer session
per project.

Quick Start:
    from projmux.services import ProjectService

    service = ProjectService()
    directory = service.load("~/.config/projmux/projects.yml", tags=["work"])
    for project in directory.get_projects_from_remotes():
        print(project.safe_name, project.path)

Domain Objects:
    ConfigProject - A project entry as written in a project or group file
    ResolvedProject - A project with inherited tags and derived identity
    ResolvedProjectDirectory - The flattened project list
"""

__version__ = "0.1.0"

from .domain import (
    ConfigProject,
    ConfigProjectDirectory,
    GitUri,
    GroupFile,
    ProjectGroupFile,
    ResolvedProject,
    ResolvedProjectDirectory,
    parse_git_uri,
)

__all__ = [
    '__version__',
    'ConfigProject',
    'ConfigProjectDirectory',
    'GitUri',
    'GroupFile',
    'ProjectGroupFile',
    'ResolvedProject',
    'ResolvedProjectDirectory',
    'parse_git_uri',
]
