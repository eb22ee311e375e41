"""
Multiplexer interface.

A session goes absent -> running (created attached or detached) ->
foreground (switch/attach) -> absent (kill). Backends implement the
transitions with whatever commands their multiplexer understands.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional


class Multiplexer(ABC):
    """Session lifecycle operations."""

    name = "abstract"

    @abstractmethod
    def open(self, path: Path, name: str) -> None:
        """Bring session `name` rooted at `path` to the foreground, creating it if needed."""

    @abstractmethod
    def open_existing(self, name: str) -> None:
        """Bring an existing session to the foreground."""

    @abstractmethod
    def list_sessions(self) -> List[str]:
        """Names of all running sessions."""

    @abstractmethod
    def get_current_session(self) -> Optional[str]:
        """Name of the session the caller is in, if any."""

    @abstractmethod
    def kill_sessions(self, names: List[str], current: Optional[str]) -> List[str]:
        """Kill sessions, the current one last. Returns the names killed."""

    @abstractmethod
    def unique_session(self) -> Optional[str]:
        """Open a session in the home directory under the lowest free numeric name."""
