"""
Project domain objects for projmux.

ConfigProject is a project entry as written in a config or group file.
ResolvedProject is the same entry after tag propagation and git URI
parsing, ready for session operations. Both are immutable; to "update"
one, create a new instance with dataclasses.replace().
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from ..exit_codes import ConfigIOError
from .git_uri import GitUri, parse_git_uri


def _tag_set(value, source: Optional[str] = None) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigIOError(f"'tags' must be a list of strings, got {value!r}", source)
    return frozenset(str(t) for t in value)


@dataclass(frozen=True)
class ConfigProject:
    """A raw project entry: remote URI, optional name override, own tags."""
    remote: str
    name: Optional[str] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> 'ConfigProject':
        """
        Build a ConfigProject from a parsed YAML mapping.

        Args:
            data: Mapping with 'remote' and optional 'name' and 'tags'
            source: File the entry came from, for error messages

        Raises:
            ConfigIOError: if the mapping is not a valid project entry
        """
        remote = data.get('remote')
        if not remote or not isinstance(remote, str):
            raise ConfigIOError(f"project entry is missing a 'remote': {data!r}", source)

        unknown = set(data) - {'remote', 'name', 'tags'}
        if unknown:
            raise ConfigIOError(f"unknown project keys {sorted(unknown)} in {data!r}", source)

        name = data.get('name')
        return cls(
            remote=remote,
            name=str(name) if name is not None else None,
            tags=_tag_set(data.get('tags'), source),
        )

    def with_tags(self, tags: Iterable[str]) -> 'ConfigProject':
        """Create a new ConfigProject with tags unioned into its own."""
        return replace(self, tags=self.tags | frozenset(tags))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in config-file shape: no empty name or tags."""
        result: Dict[str, Any] = {}
        if self.name is not None:
            result['name'] = self.name
        result['remote'] = self.remote
        if self.tags:
            result['tags'] = sorted(self.tags)
        return result

    def __str__(self) -> str:
        return self.remote


@dataclass(frozen=True)
class GroupFile:
    """Reference to a group file from an include list."""
    path: Path


GroupItem = Union[GroupFile, ConfigProject]


def parse_group_item(value: Any, source: Optional[str] = None) -> GroupItem:
    """A bare string is a group file path, a mapping is a project entry."""
    if isinstance(value, str):
        return GroupFile(Path(value))
    if isinstance(value, dict):
        return ConfigProject.from_dict(value, source)
    raise ConfigIOError(f"include entries must be a path or a project mapping, got {value!r}", source)


def parse_include(values: Any, source: Optional[str] = None) -> List[GroupItem]:
    """Parse an 'include' list, preserving order."""
    if values is None:
        return []
    if not isinstance(values, list):
        raise ConfigIOError(f"'include' must be a list, got {type(values).__name__}", source)
    return [parse_group_item(v, source) for v in values]


@dataclass(frozen=True)
class ResolvedProject:
    """
    Fully materialized project.

    Attributes:
        project_folder_path: Projects root the project lives under
        path: project_folder_path / name
        remote: Remote URI as configured
        git_uri: Parsed remote
        tags: Own tags plus everything inherited from group files
        name_override: Name set in the config entry, if any
    """
    project_folder_path: Path
    path: Path
    remote: str
    git_uri: GitUri
    tags: FrozenSet[str] = field(default_factory=frozenset)
    name_override: Optional[str] = None

    @classmethod
    def new(
        cls,
        root_dir: Path,
        remote: str,
        tags: Iterable[str] = (),
        name: Optional[str] = None,
    ) -> 'ResolvedProject':
        """
        Derive identity from a remote.

        Raises:
            RemoteNotParsableError: if remote is not a git URI
        """
        git_uri = parse_git_uri(remote)
        root_dir = Path(root_dir)
        return cls(
            project_folder_path=root_dir,
            path=root_dir / (name or git_uri.name),
            remote=remote,
            git_uri=git_uri,
            tags=frozenset(tags),
            name_override=name,
        )

    @classmethod
    def from_config_project(cls, root_dir: Path, project: ConfigProject) -> 'ResolvedProject':
        return cls.new(root_dir, project.remote, project.tags, project.name)

    @property
    def name(self) -> str:
        return self.name_override or self.git_uri.name

    @property
    def safe_name(self) -> str:
        """Session-safe name: every '.' becomes '_'."""
        return self.name.replace('.', '_')

    @property
    def repo_url(self) -> str:
        return self.git_uri.web_url

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON/YAML/CSV output.
        """
        return {
            'name': self.name,
            'safe_name': self.safe_name,
            'path': str(self.path),
            'project_folder_path': str(self.project_folder_path),
            'remote': self.remote,
            'repo_url': self.repo_url,
            'git_uri': self.git_uri.to_dict(),
            'tags': sorted(self.tags),
        }

    def __str__(self) -> str:
        return self.name
