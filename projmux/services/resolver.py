"""
Project tree resolution.

Flattens a root project file and the group files it (transitively)
includes into an ordered list of projects. Each project ends up with its
own tags plus the tags of every group file on the path from the root to
it. Traversal is depth-first pre-order, so output order follows
declaration order.

Group files are reloaded on every reference: a file reachable through two
different include paths is processed twice, once per context, with
different inherited tags. Only a file that appears again on its own
include path (a cycle) is rejected.
"""

from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union
import logging

from ..config import expand_path
from ..domain import (
    ConfigProject,
    ConfigProjectDirectory,
    GroupFile,
    ProjectGroupFile,
    ResolvedProjectDirectory,
)
from ..exit_codes import GroupFileCycleError
from ..infra.yaml_store import YamlStore

logger = logging.getLogger(__name__)


class Resolver:
    """
    Loads project files and flattens the include tree.

    Example:
        resolver = Resolver()
        root = resolver.load_project_directory(Path("~/.config/projmux/projects.yml"))
        for project in resolver.resolve(root):
            print(project.remote, sorted(project.tags))
    """

    def __init__(self, store: Optional[YamlStore] = None):
        self.store = store or YamlStore()

    def load_project_directory(self, path: Union[str, Path]) -> ConfigProjectDirectory:
        """
        Read a root project file.

        Raises:
            ConfigIOError: if the file is missing, unreadable or malformed
        """
        path = expand_path(path)
        logger.debug(f"reading project directory file {path}")
        return ConfigProjectDirectory.from_dict(self.store.read(path), path)

    def load_group_file(self, path: Union[str, Path]) -> ProjectGroupFile:
        """
        Read a group file.

        Raises:
            ConfigIOError: if the file is missing, unreadable or malformed
        """
        path = Path(path)
        logger.debug(f"reading group file {path}")
        return ProjectGroupFile.from_dict(self.store.read(path), path)

    def resolve(self, directory: ConfigProjectDirectory) -> List[ConfigProject]:
        """
        Flatten the include tree of a root project file.

        Returns:
            Projects in declaration order with inherited tags merged in

        Raises:
            ConfigIOError: if any group file cannot be loaded
            GroupFileCycleError: if a group file includes itself
        """
        logger.debug("loading group files, and projects...")
        projects = self._resolve_items(
            directory.include,
            base_dir=directory.source_path.parent,
            inherited=frozenset(),
            chain=(),
        )
        logger.debug(f"finished loading group files, and projects ({len(projects)} found)")
        return projects

    def resolve_directory(self, directory: ConfigProjectDirectory) -> ResolvedProjectDirectory:
        return ResolvedProjectDirectory(
            resolved_from_path=directory.source_path,
            projects_directory=directory.projects_directory,
            projects=tuple(self.resolve(directory)),
        )

    def resolve_file(self, path: Union[str, Path]) -> ResolvedProjectDirectory:
        """Load a root project file and resolve it."""
        return self.resolve_directory(self.load_project_directory(path))

    def _resolve_items(
        self,
        items: Iterable,
        base_dir: Path,
        inherited: FrozenSet[str],
        chain: Tuple[Path, ...],
    ) -> List[ConfigProject]:
        projects: List[ConfigProject] = []
        for item in items:
            if isinstance(item, GroupFile):
                group_path = expand_path(item.path, base=base_dir)
                canonical = group_path.resolve()
                if canonical in chain:
                    cycle = chain[chain.index(canonical):] + (canonical,)
                    raise GroupFileCycleError(cycle)

                group = self.load_group_file(group_path)
                projects.extend(self._resolve_items(
                    group.include,
                    base_dir=group_path.parent,
                    inherited=inherited | group.tags,
                    chain=chain + (canonical,),
                ))
            elif isinstance(item, ConfigProject):
                projects.append(item.with_tags(inherited))
            else:
                raise TypeError(f"unexpected include item {item!r}")
        return projects
