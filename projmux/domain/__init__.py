"""
Domain layer for projmux.

Contains pure domain objects with no I/O or side effects:
- GitUri: Parsed git remote (host, owner, name)
- ConfigProject / GroupFile: Entries of a project or group file include list
- ResolvedProject: A project after tag propagation and URI parsing
- ProjectGroupFile / ConfigProjectDirectory: Parsed project files
- ResolvedProjectDirectory: The flattened, tag-merged project list

These objects are immutable and provide serialization methods for output.
"""

from .git_uri import GitUri, parse_git_uri
from .project import ConfigProject, GroupFile, GroupItem, ResolvedProject
from .project_directory import (
    ConfigProjectDirectory,
    ProjectGroupFile,
    ResolvedProjectDirectory,
)

__all__ = [
    'GitUri',
    'parse_git_uri',
    'ConfigProject',
    'GroupFile',
    'GroupItem',
    'ResolvedProject',
    'ConfigProjectDirectory',
    'ProjectGroupFile',
    'ResolvedProjectDirectory',
]
