"""
Project directory files and their resolved form.

ConfigProjectDirectory is the root project file: where projects live on
disk plus an ordered include list. ProjectGroupFile is a composable
fragment whose tags are inherited by everything it transitively includes.
ResolvedProjectDirectory is the flattened, tag-merged result.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..config import expand_path
from ..exit_codes import ConfigIOError
from .project import (
    ConfigProject,
    GroupItem,
    ResolvedProject,
    _tag_set,
    parse_include,
)


def _require_mapping(data: Any, source: Optional[str]) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigIOError(f"expected a mapping at the top level, got {type(data).__name__}", source)
    return data


@dataclass(frozen=True)
class ProjectGroupFile:
    """A group file: own tags plus an ordered include list."""
    source_path: Path
    tags: FrozenSet[str] = field(default_factory=frozenset)
    include: Tuple[GroupItem, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, source_path: Path) -> 'ProjectGroupFile':
        source = str(source_path)
        data = _require_mapping(data, source)
        unknown = set(data) - {'tags', 'include'}
        if unknown:
            raise ConfigIOError(f"unknown group file keys {sorted(unknown)}", source)
        return cls(
            source_path=Path(source_path),
            tags=_tag_set(data.get('tags'), source),
            include=tuple(parse_include(data.get('include'), source)),
        )


@dataclass(frozen=True)
class ConfigProjectDirectory:
    """Root project file. Contributes no tags of its own."""
    source_path: Path
    projects_directory: Path
    include: Tuple[GroupItem, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, source_path: Path) -> 'ConfigProjectDirectory':
        source = str(source_path)
        data = _require_mapping(data, source)
        projects_directory = data.get('projects_directory')
        if not projects_directory:
            raise ConfigIOError("missing 'projects_directory'", source)
        unknown = set(data) - {'projects_directory', 'include'}
        if unknown:
            raise ConfigIOError(f"unknown project file keys {sorted(unknown)}", source)
        return cls(
            source_path=Path(source_path),
            projects_directory=expand_path(projects_directory, base=Path(source_path).parent),
            include=tuple(parse_include(data.get('include'), source)),
        )


@dataclass(frozen=True)
class ResolvedProjectDirectory:
    """Flattened, tag-merged resolution result."""
    resolved_from_path: Path
    projects_directory: Path
    projects: Tuple[ConfigProject, ...] = ()

    def filter_by_tags(self, tags: Optional[Iterable[str]]) -> 'ResolvedProjectDirectory':
        """
        Keep projects carrying at least one of the requested tags.

        An empty or missing tag list returns the directory unchanged. A tag
        list that matches nothing yields an empty project list.
        """
        wanted = set(tags or ())
        if not wanted:
            return self
        return replace(
            self,
            projects=tuple(p for p in self.projects if p.tags & wanted),
        )

    def all_tags(self) -> List[str]:
        """Sorted union of every project's tags."""
        tags = set()
        for project in self.projects:
            tags.update(project.tags)
        return sorted(tags)

    def get_projects_from_remotes(self) -> List[ResolvedProject]:
        """
        Materialize every entry into a ResolvedProject.

        Raises:
            RemoteNotParsableError: on the first unparsable remote
        """
        return [
            ResolvedProject.from_config_project(self.projects_directory, p)
            for p in self.projects
        ]

    def remotes(self) -> List[str]:
        return [p.remote for p in self.projects]
