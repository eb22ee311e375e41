"""
Project service for projmux.

Provides high-level operations over a project tree:
- Loading and tag filtering
- Picking projects interactively
- Scanning a projects directory on disk
- Reporting tracked vs. untracked projects
- Appending new projects to the root project file
"""

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging

from ..config import expand_path
from ..domain import (
    ConfigProject,
    ConfigProjectDirectory,
    ResolvedProject,
    ResolvedProjectDirectory,
    parse_git_uri,
)
from ..exit_codes import (
    ConfigIOError,
    NoItemSelectedError,
    NoProjectSelectedError,
    ProjectAlreadyTrackedError,
    ProjectPathDoesNotExistError,
    RemoteNotParsableError,
    SubprocessIOError,
)
from ..infra import FzfPicker, GitClient, YamlStore
from .resolver import Resolver

logger = logging.getLogger(__name__)


@dataclass
class ProjectReport:
    """Projects on disk compared with the projects in the config."""
    projects_directory: Path
    fs_projects: List[ResolvedProject] = field(default_factory=list)
    config_projects: List[ResolvedProject] = field(default_factory=list)
    untracked: List[ResolvedProject] = field(default_factory=list)
    ignored: List[Path] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'projects_directory': str(self.projects_directory),
            'file_system': len(self.fs_projects),
            'config_list': len(self.config_projects),
            'not_tracked': [p.name for p in self.untracked],
            'ignored': [str(p) for p in self.ignored],
        }


@dataclass
class ConfigChange:
    """A pending rewrite of a project file."""
    path: Path
    before: str
    after: str
    added: List[ConfigProject] = field(default_factory=list)

    def diff_lines(self) -> List[Tuple[str, str]]:
        """Line diff as (sign, line) pairs: '-' removed, '+' added, ' ' kept."""
        old = self.before.splitlines()
        new = self.after.splitlines()
        lines: List[Tuple[str, str]] = []
        matcher = difflib.SequenceMatcher(a=old, b=new, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == 'equal':
                lines.extend((' ', line) for line in old[i1:i2])
                continue
            lines.extend(('-', line) for line in old[i1:i2])
            lines.extend(('+', line) for line in new[j1:j2])
        return lines


class ProjectService:
    """
    Service for loading, scanning and editing project trees.

    Example:
        service = ProjectService()
        directory = service.load("~/.config/projmux/projects.yml", tags=["work"])
        for project in directory.get_projects_from_remotes():
            print(project.name, project.path)
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        git_client: Optional[GitClient] = None,
        picker: Optional[FzfPicker] = None,
        store: Optional[YamlStore] = None,
    ):
        """
        Initialize ProjectService.

        Args:
            resolver: Resolver instance (creates default if None)
            git_client: Git client instance (creates default if None)
            picker: Picker instance (creates default if None)
            store: YAML store used for rewrites (shared with the resolver if None)
        """
        self.store = store or YamlStore()
        self.resolver = resolver or Resolver(self.store)
        self.git = git_client or GitClient()
        self.picker = picker or FzfPicker()

    # -- loading -------------------------------------------------------------

    def load(
        self,
        config_path: Union[str, Path],
        tags: Optional[Iterable[str]] = None,
    ) -> ResolvedProjectDirectory:
        """
        Resolve a root project file, optionally narrowed to tags.

        Raises:
            ConfigIOError: if any file in the tree cannot be loaded
        """
        directory = self.resolver.resolve_file(config_path)
        return directory.filter_by_tags(tags)

    # -- picking -------------------------------------------------------------

    def pick_project(self, projects: Sequence[ResolvedProject]) -> ResolvedProject:
        """
        Let the user pick one project by name.

        Raises:
            NoItemsFoundError: if there is nothing to pick from
            NoProjectSelectedError: if the user aborted
        """
        try:
            return self.picker.pick_one(list(projects))
        except NoItemSelectedError as e:
            raise NoProjectSelectedError() from e

    def pick_projects(self, projects: Sequence[Any]) -> List[Any]:
        """
        Let the user pick several projects.

        Raises:
            NoItemsFoundError: if there is nothing to pick from
            NoProjectSelectedError: if nothing was picked
        """
        picked = self.picker.pick_many(list(projects))
        if not picked:
            raise NoProjectSelectedError("no projects were selected")
        return picked

    # -- filesystem ------------------------------------------------------------

    def get_projects_from_fs(self, root_dir: Union[str, Path]) -> Tuple[List[ResolvedProject], List[Path]]:
        """
        Scan the immediate subdirectories of root_dir.

        Directories without an origin remote, or with a remote that does not
        parse, are returned in the ignored list instead of failing the scan.

        Returns:
            (projects, ignored directories)

        Raises:
            ProjectPathDoesNotExistError: if root_dir is not a directory
        """
        root = expand_path(root_dir)
        if not root.is_dir():
            raise ProjectPathDoesNotExistError(root)

        projects: List[ResolvedProject] = []
        ignored: List[Path] = []

        for entry in sorted(root.iterdir()):
            if not entry.is_dir():
                continue

            try:
                remote = self.git.remote_url(entry)
            except SubprocessIOError as e:
                logger.warning(f"skipping [{entry}]. {e}")
                ignored.append(entry)
                continue
            if remote is None:
                logger.warning(f"skipping [{entry}]. Remote was not found.")
                ignored.append(entry)
                continue

            try:
                uri = parse_git_uri(remote)
            except RemoteNotParsableError:
                logger.warning(f"skipping [{entry}]. Remote '{remote}' could not be parsed.")
                ignored.append(entry)
                continue

            name = entry.name if entry.name != uri.name else None
            projects.append(ResolvedProject.new(root, remote, name=name))

        return projects, ignored

    def report(self, directory: ResolvedProjectDirectory) -> ProjectReport:
        """
        Compare the projects directory on disk with the config.

        Tracking is decided by name: a directory counts as tracked when a
        configured project resolves to the same name.
        """
        logger.debug(f"getting projects from fs [{directory.projects_directory}]")
        fs_projects, ignored = self.get_projects_from_fs(directory.projects_directory)
        config_projects = directory.get_projects_from_remotes()

        config_names = {p.name for p in config_projects}
        untracked = [p for p in fs_projects if p.name not in config_names]

        return ProjectReport(
            projects_directory=directory.projects_directory,
            fs_projects=fs_projects,
            config_projects=config_projects,
            untracked=untracked,
            ignored=ignored,
        )

    def import_candidates(
        self,
        directory: ResolvedProjectDirectory,
        scan_dir: Optional[Union[str, Path]] = None,
    ) -> List[ConfigProject]:
        """
        Projects on disk whose remote is not yet in the config.

        Args:
            directory: Resolved config
            scan_dir: Directory to scan (defaults to the config's projects directory)
        """
        existing = set(directory.remotes())
        fs_projects, _ = self.get_projects_from_fs(scan_dir or directory.projects_directory)
        return [
            ConfigProject(remote=p.remote)
            for p in fs_projects
            if p.remote not in existing
        ]

    # -- editing -------------------------------------------------------------

    def plan_add(self, config_path: Union[str, Path], projects: Iterable[ConfigProject]) -> ConfigChange:
        """
        Compute the rewrite of a root project file with projects appended.

        Nothing is written; pass the result to apply() once confirmed.

        Raises:
            ConfigIOError: if the root file cannot be read or the result is invalid
        """
        path = expand_path(config_path)
        before = self.store.read_text(path)
        data = self.store.read(path)
        if not isinstance(data, dict):
            raise ConfigIOError("expected a mapping at the top level", str(path))

        added = list(projects)
        data = dict(data)
        data['include'] = list(data.get('include') or []) + [p.to_dict() for p in added]

        # Refuse to produce a file the resolver would reject.
        ConfigProjectDirectory.from_dict(data, path)

        return ConfigChange(path=path, before=before, after=self.store.dumps(data), added=added)

    def apply(self, change: ConfigChange) -> None:
        """Write a planned change."""
        self.store.write_text(change.path, change.after)

    def new_project(
        self,
        directory: ResolvedProjectDirectory,
        remote: str,
        init: bool = False,
    ) -> Tuple[ConfigProject, bool]:
        """
        Bring a new remote into the projects directory.

        Without init the remote is cloned; with init an empty repository
        is created with the remote as origin.

        Returns:
            (project entry to add, whether the checkout succeeded)

        Raises:
            ProjectAlreadyTrackedError: if the config already has this remote
            RemoteNotParsableError: if remote is not a git URI
        """
        if remote in directory.remotes():
            raise ProjectAlreadyTrackedError(remote)

        uri = parse_git_uri(remote)
        projects_dir = directory.projects_directory
        projects_dir.mkdir(parents=True, exist_ok=True)
        target = projects_dir / uri.name

        ok = True
        if init:
            target.mkdir(exist_ok=True)
            if not self.git.is_git_repo(target):
                ok = self.git.init(target) and self.git.add_remote(target, remote)
        else:
            logger.debug(f"Attempting to clone {remote}...")
            result = self.git.clone(remote, projects_dir)
            ok = result.ok
            if not ok:
                logger.error(f"Failed cloning {remote}: {result.stderr.strip()}")

        return ConfigProject(remote=remote), ok
