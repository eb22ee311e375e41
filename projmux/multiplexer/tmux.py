"""Tmux session management for projmux."""

import logging
from pathlib import Path
from typing import List, Optional

from ..exit_codes import CouldNotCreateSessionError, ProjectPathDoesNotExistError
from ..infra.process import ProcessResult, Runner, run_process
from .base import Multiplexer

logger = logging.getLogger(__name__)

UNIQUE_SESSION_NAMES = [str(i) for i in range(10)]


class TmuxMultiplexer(Multiplexer):
    """
    tmux backend.

    Args:
        home: Directory new home sessions start in
        in_session: Whether the caller runs inside tmux ($TMUX is set)
        runner: Process runner (default: run_process)
    """

    name = "tmux"

    def __init__(self, home: Path, in_session: bool = False, runner: Optional[Runner] = None):
        self.home = Path(home)
        self.in_session = in_session
        self.runner = runner or run_process

    def _tmux(self, *args: str, interactive: bool = False) -> ProcessResult:
        # Attaching needs the terminal, so its output is not captured.
        return self.runner(['tmux', *args], capture_stdout=not interactive)

    # -- public operations -------------------------------------------------

    def open(self, path: Path, name: str) -> None:
        """
        Open a session for a project.

        Outside tmux: create-and-attach (re-attaching if it already exists).
        Inside tmux: switch to the session, creating it detached first when
        it does not exist.

        Raises:
            ProjectPathDoesNotExistError: if path is missing
            CouldNotCreateSessionError: if tmux refused to create the session
        """
        path = Path(path)
        logger.info(f"Attempting to open tmux session with path: {path}, name: {name}")

        if not path.exists():
            raise ProjectPathDoesNotExistError(path)

        if not self.in_session:
            result = self.create_attached(name, path)
            if not result.ok:
                raise CouldNotCreateSessionError(name, result.stderr.strip())
        elif self.has_session(name):
            logger.info(f"Session '{name}' already exists, opening.")
            self._switch_or_log(name)
        else:
            logger.info(f"Session '{name}' does not already exist, creating and opening.")
            result = self.create_detached(name, path)
            if not result.ok:
                raise CouldNotCreateSessionError(name, result.stderr.strip())
            self._switch_or_log(name)

    def open_existing(self, name: str) -> None:
        logger.info(f"Attempting to open existing tmux session: {name}")
        if not self.in_session:
            logger.debug("Not currently in a session, attaching")
            if not self.attach(name):
                logger.error(f"Could not attach to session '{name}'.")
            return
        self._switch_or_log(name)

    def list_sessions(self) -> List[str]:
        result = self._tmux('ls')
        if not result.ok:
            return []
        sessions = []
        for line in result.stdout.splitlines():
            session = line.split(':', 1)[0].strip()
            if session:
                sessions.append(session)
        return sessions

    def get_current_session(self) -> Optional[str]:
        if not self.in_session:
            return None
        result = self._tmux('display-message', '-p', '#S')
        current = result.stdout.strip()
        return current if result.ok and current else None

    def kill_sessions(self, names: List[str], current: Optional[str]) -> List[str]:
        """
        Kill the named sessions.

        The current session is killed last so the caller's client is not
        detached before the others are gone. Failures are logged and the
        remaining sessions are still killed.
        """
        killed = []
        ordered = [s for s in names if s != current]
        if current is not None and current in names:
            logger.debug(f"current session [{current}] was included to be killed.")
            ordered.append(current)

        for session in ordered:
            if not session:
                logger.warning("No session picked")
                continue
            if self.kill_session(session):
                logger.info(f"Killed {session}.")
                killed.append(session)
            else:
                logger.error(f"Error while killing {session}.")
        return killed

    def unique_session(self) -> Optional[str]:
        """
        Open a home-directory session named by the lowest unused digit.

        Returns:
            Name of the opened session, or None when 0-9 are all taken
        """
        for name in UNIQUE_SESSION_NAMES:
            if self.has_session(name):
                continue
            try:
                self.open(self.home, name)
            except CouldNotCreateSessionError as e:
                logger.error(str(e))
                continue
            return name
        logger.debug("all unique session names are taken")
        return None

    def _switch_or_log(self, name: str) -> None:
        if not self.switch(name):
            logger.error(f"Could not switch to session '{name}'.")

    # -- tmux primitives ---------------------------------------------------

    def has_session(self, name: str) -> bool:
        return self._tmux('has-session', '-t', f'={name}').ok

    def create_attached(self, name: str, path: Path) -> ProcessResult:
        return self._tmux('new-session', '-A', '-s', name, '-c', str(path), interactive=True)

    def create_detached(self, name: str, path: Path) -> ProcessResult:
        return self._tmux('new-session', '-d', '-s', name, '-c', str(path))

    def switch(self, name: str) -> bool:
        return self._tmux('switch-client', '-t', name).ok

    def attach(self, name: Optional[str] = None) -> bool:
        args = ['attach']
        if name:
            args += ['-t', name]
        return self._tmux(*args, interactive=True).ok

    def kill_session(self, name: str) -> bool:
        return self._tmux('kill-session', '-t', f'={name}').ok
