"""
Infrastructure layer for projmux.

Contains abstractions for external systems:
- run_process: The one place subprocesses are spawned
- GitClient: Git command execution
- FzfPicker: Interactive fuzzy selection
- ZoxideClient: Directory lookup for scratch sessions
- YamlStore: YAML file persistence

These provide clean interfaces that can be mocked for testing.
"""

from .process import run_process, ProcessResult
from .git_client import GitClient
from .fzf import FzfPicker
from .zoxide import ZoxideClient
from .yaml_store import YamlStore

__all__ = [
    'run_process',
    'ProcessResult',
    'GitClient',
    'FzfPicker',
    'ZoxideClient',
    'YamlStore',
]
