"""
Session service for projmux.

Glues project selection to the multiplexer: opening a project session,
scratch sessions, killing sessions and numbered home sessions.
"""

from pathlib import Path
from typing import List, Optional, Union
import logging

from ..domain import ResolvedProject
from ..exit_codes import (
    CouldNotCreateSessionError,
    NoItemSelectedError,
    NoSessionsFoundError,
    ProjectPathDoesNotExistError,
)
from ..infra import FzfPicker, ZoxideClient
from ..multiplexer import Multiplexer

logger = logging.getLogger(__name__)

DEFAULT_SCRATCH_NAME = "scratch"


class SessionService:
    """
    Service for multiplexer sessions.

    Session creation failures are reported through the returned error
    instead of being raised: the process still exits cleanly.
    """

    def __init__(
        self,
        multiplexer: Multiplexer,
        home: Path,
        picker: Optional[FzfPicker] = None,
        zoxide: Optional[ZoxideClient] = None,
    ):
        self.multiplexer = multiplexer
        self.home = Path(home)
        self.picker = picker or FzfPicker()
        self.zoxide = zoxide or ZoxideClient()

    def open_project(self, project: ResolvedProject) -> Optional[CouldNotCreateSessionError]:
        """
        Open a session for a project, named by its safe name.

        Returns:
            The creation error if the multiplexer refused, else None

        Raises:
            ProjectPathDoesNotExistError: if the project is not checked out
        """
        return self._open(project.path, project.safe_name)

    def scratch(
        self,
        name: Optional[str] = None,
        directory: Optional[Union[str, Path]] = None,
        zoxide_query: Optional[str] = None,
        interactive: bool = False,
    ) -> Optional[CouldNotCreateSessionError]:
        """
        Open an ad-hoc session.

        With a zoxide query (or interactive) the directory comes from zoxide
        and the default name from its basename. Otherwise the session opens
        in directory, or the home directory.

        Raises:
            ProjectPathDoesNotExistError: if zoxide finds nothing
            NoItemSelectedError: if the interactive zoxide pick was aborted
        """
        if zoxide_query is not None or interactive:
            path = self._zoxide_directory(zoxide_query or "", interactive)
            default_name = path.name.replace('.', '_') or DEFAULT_SCRATCH_NAME
        else:
            path = Path(directory).expanduser() if directory else self.home
            default_name = DEFAULT_SCRATCH_NAME

        session_name = (name or default_name).replace('.', '_')
        logger.debug(f"scratch session {session_name} in {path}")
        return self._open(path, session_name)

    def kill(self) -> List[str]:
        """
        Pick running sessions and kill them, the current one last.

        Raises:
            NoSessionsFoundError: if no sessions are running
        """
        sessions = self.multiplexer.list_sessions()
        if not sessions:
            raise NoSessionsFoundError()

        picked = self.picker.pick_many(sessions)
        if not picked:
            logger.info("no sessions picked")
            return []

        current = self.multiplexer.get_current_session()
        return self.multiplexer.kill_sessions(picked, current)

    def home_session(self) -> Optional[str]:
        """Open a numbered session in the home directory."""
        return self.multiplexer.unique_session()

    def _zoxide_directory(self, query: str, interactive: bool) -> Path:
        if interactive:
            path = self.zoxide.query_interactive(query)
            if path is None:
                raise NoItemSelectedError("no directory selected")
        else:
            path = self.zoxide.query(query)
            if path is None:
                raise ProjectPathDoesNotExistError(query)
        return path

    def _open(self, path: Path, name: str) -> Optional[CouldNotCreateSessionError]:
        try:
            self.multiplexer.open(path, name)
        except CouldNotCreateSessionError as e:
            logger.debug(f"could not create session {name}: {e}")
            return e
        return None
