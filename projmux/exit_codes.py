"""
Standard exit codes and error types for projmux commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOTHING_FOUND = 64       # Nothing to choose from (no projects, no sessions)
CONFIG_ERROR = 66        # Configuration or project file error
PERMISSION_ERROR = 67    # Insufficient permissions
DATA_ERROR = 70          # Data format or validation error
NOT_SELECTED = 72        # User aborted an interactive pick or confirmation
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'YAMLError': CONFIG_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when an application setting is invalid."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class ConfigIOError(CommandError):
    """Raised when a config, project or group file is missing, unreadable or malformed."""
    def __init__(self, message: str, path: Optional[str] = None):
        if path is not None:
            message = f"{message} [{path}]"
        super().__init__(message, CONFIG_ERROR)
        self.path = path


class GroupFileCycleError(ConfigIOError):
    """Raised when a group file includes itself, directly or transitively."""
    def __init__(self, chain):
        self.chain = [str(p) for p in chain]
        super().__init__("group file inclusion cycle: " + " -> ".join(self.chain))


class RemoteNotParsableError(CommandError):
    """Raised when a remote matches neither the SSH nor the URL git grammar."""
    def __init__(self, remote: str):
        super().__init__(f"could not parse git remote '{remote}'", DATA_ERROR)
        self.remote = remote


class ProjectPathDoesNotExistError(CommandError):
    """Raised when a project or projects directory is not on disk."""
    def __init__(self, path):
        super().__init__(f"project path {path} does not exist")
        self.path = str(path)


class ProjectAlreadyTrackedError(CommandError):
    """Raised when adding a remote that the config already tracks."""
    def __init__(self, remote: str):
        super().__init__(f"project with remote '{remote}' is already tracked")
        self.remote = remote


class NoItemSelectedError(CommandError):
    """Raised when the user aborts an interactive pick."""
    def __init__(self, message: str = "no item was selected"):
        super().__init__(message, NOT_SELECTED)


class NoProjectSelectedError(NoItemSelectedError):
    """Raised when no project was picked from the list."""
    def __init__(self, message: str = "no project was selected from the list, cannot proceed"):
        super().__init__(message)


class ConfirmationDeclinedError(NoItemSelectedError):
    """Raised when the user declines a confirmation prompt."""
    def __init__(self, message: str = "changes were not accepted"):
        super().__init__(message)


class NoItemsFoundError(CommandError):
    """Raised when there is nothing to choose from."""
    def __init__(self, message: str = "could not find any items to choose from"):
        super().__init__(message, NOTHING_FOUND)


class NoSessionsFoundError(NoItemsFoundError):
    """Raised when the multiplexer reports no sessions."""
    def __init__(self, message: str = "could not find any sessions to choose from"):
        super().__init__(message)


class CouldNotCreateSessionError(CommandError):
    """Raised when the multiplexer fails to create a session."""
    def __init__(self, name: str, detail: str = ""):
        message = f"session '{name}' failed to open"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.name = name


class SubprocessIOError(CommandError):
    """Raised when an external command cannot be spawned or awaited."""
    def __init__(self, command, detail: str = ""):
        cmd_str = command if isinstance(command, str) else ' '.join(str(c) for c in command)
        message = f"failed to run '{cmd_str}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.command = cmd_str
