"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .config import Environment, expand_path, get_config_path, load_config, setup_logging
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .format_utils import OUTPUT_FORMATS, format_output
from .infra import FzfPicker, GitClient, YamlStore, ZoxideClient
from .multiplexer import Multiplexer, get_multiplexer
from .render import render_error
from .services import ProjectService, Resolver, SessionService

logger = logging.getLogger(__name__)


class AppContext:
    """
    Per-invocation state shared by all commands (click's ctx.obj).

    The environment is resolved once here and handed to the services.
    The app config is loaded lazily so that config errors surface inside
    standard_command with the right exit code.
    """

    def __init__(self, env: Environment, config_path: Optional[Path] = None, verbosity: int = 0):
        self.env = env
        self.config_path = config_path
        self.verbosity = verbosity
        self._config: Optional[Dict[str, Any]] = None

    @property
    def config(self) -> Dict[str, Any]:
        if self._config is None:
            path = self.config_path or get_config_path(self.env)
            self._config = load_config(path, self.env)
            if not self.verbosity:
                log_config = self._config.get('logging', {})
                setup_logging(log_config.get('level'), log_config.get('format'))
        return self._config

    def projects_config(self, override: Optional[str] = None) -> Path:
        """Root project file: the -p option, else general.projects_config."""
        value = override or self.config['general']['projects_config']
        return expand_path(value)

    def picker(self) -> FzfPicker:
        picker_config = self.config.get('picker', {})
        return FzfPicker(
            command=picker_config.get('command', 'fzf'),
            args=picker_config.get('args') or [],
        )

    def project_service(self) -> ProjectService:
        store = YamlStore()
        return ProjectService(
            resolver=Resolver(store),
            git_client=GitClient(),
            picker=self.picker(),
            store=store,
        )

    def multiplexer(self, name: Optional[str] = None) -> Multiplexer:
        name = name or self.config['general'].get('multiplexer', 'tmux')
        return get_multiplexer(name, home=self.env.home, in_session=self.env.in_tmux)

    def session_service(self, multiplexer: Optional[str] = None) -> SessionService:
        return SessionService(
            self.multiplexer(multiplexer),
            home=self.env.home,
            picker=self.picker(),
            zoxide=ZoxideClient(),
        )


def verbosity_to_level(verbosity: int) -> Optional[int]:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return None


def parse_tags(value: Optional[str]) -> List[str]:
    """Split a comma separated --tags value, dropping blanks."""
    if not value:
        return []
    return [tag.strip() for tag in value.split(',') if tag.strip()]


def standard_command(formatted: bool = False, fields: Optional[List[str]] = None):
    """
    Decorator that provides standard CLI behavior:
    - Consistent error handling with typed exit codes
    - Errors printed in red on stderr
    - Optional formatting of returned data through --output

    Args:
        formatted: If True, the command returns data which is rendered
                  with the format named by its output_format option.
        fields: Column order for CSV output
    """
    def decorator(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            output_format = kwargs.get('output_format')

            try:
                result = func(*args, **kwargs)

                if formatted and result is not None:
                    for line in format_output(result, output_format or 'json', fields):
                        click.echo(line)

                sys.exit(SUCCESS)

            except KeyboardInterrupt:
                render_error("Interrupted by user")
                sys.exit(INTERRUPTED)
            except click.ClickException:
                raise
            except CommandError as e:
                logger.debug(f"{type(e).__name__}: {e}")
                render_error(str(e))
                sys.exit(e.exit_code)
            except Exception as e:
                logger.debug("Command failed", exc_info=True)
                render_error(f"Command failed: {e}")
                sys.exit(get_exit_code_for_exception(e))

        return wrapper
    return decorator


# Standard options that many commands share
common_options = {
    'projects_config': click.option('-p', '--projects-config', 'projects_config',
                                    type=click.Path(dir_okay=False),
                                    help='Root project file (default: general.projects_config)'),
    'tags': click.option('-t', '--tags',
                         help='Comma-separated tags; keep projects having any of them'),
    'output': click.option('-o', '--output', 'output_format',
                           type=click.Choice(OUTPUT_FORMATS),
                           help='Output format'),
    'multiplexer': click.option('-m', '--multiplexer',
                                help='Multiplexer backend (default: general.multiplexer)'),
    'yes': click.option('-y', '--yes', is_flag=True,
                        help='Apply changes without asking for confirmation'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('projects_config', 'tags')
        def my_command(projects_config, tags):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
