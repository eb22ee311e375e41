"""
Git client infrastructure for projmux.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

from typing import Optional, Union
from pathlib import Path
import logging

from .process import ProcessResult, Runner, run_process

logger = logging.getLogger(__name__)


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        remote = client.remote_url("/path/to/repo")
        if remote is None:
            print("No origin remote")
    """

    def __init__(self, runner: Optional[Runner] = None):
        """
        Initialize GitClient.

        Args:
            runner: Process runner (default: run_process)
        """
        self.runner = runner or run_process

    def _run(self, *args: str, cwd: Union[str, Path, None] = None) -> ProcessResult:
        return self.runner(['git', *args], cwd=cwd)

    def is_git_repo(self, path: Union[str, Path]) -> bool:
        """Check if path is a git repository."""
        git_dir = Path(path) / ".git"
        return git_dir.exists()

    def remote_url(self, path: Union[str, Path], remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Args:
            path: Path to git repository
            remote: Remote name (default: "origin")

        Returns:
            Remote URL or None if the directory has no such remote
        """
        result = self._run('remote', 'get-url', remote, cwd=path)
        if result.ok and result.stdout.strip():
            return result.stdout.strip()
        return None

    def init(self, path: Union[str, Path]) -> bool:
        """
        Initialize a repository.

        Returns:
            True if successful
        """
        return self._run('init', cwd=path).ok

    def add_remote(self, path: Union[str, Path], url: str, remote: str = "origin") -> bool:
        """
        Add a remote.

        Returns:
            True if successful
        """
        return self._run('remote', 'add', remote, url, cwd=path).ok

    def clone(self, url: str, parent: Union[str, Path], name: Optional[str] = None) -> ProcessResult:
        """
        Clone url into parent (as parent/name when name is given).

        Returns:
            ProcessResult of the clone
        """
        args = ['clone', url]
        if name:
            args.append(name)
        return self._run(*args, cwd=parent)
