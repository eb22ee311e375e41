#!/usr/bin/env python3

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("projmux")

CONFIG_FILENAMES = ['config.yaml', 'config.yml']
ENV_PREFIX = "PROJMUX_"


@dataclass(frozen=True)
class Environment:
    """
    Process environment values resolved once at startup.

    Threaded explicitly into the services instead of reading os.environ
    from deep inside resolution code.
    """
    home: Path
    xdg_config_home: Path
    in_tmux: bool = False
    config_file: Optional[Path] = None
    overrides: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Environment':
        """Build an Environment from a mapping (defaults to os.environ)."""
        if environ is None:
            environ = os.environ

        home = Path(environ.get('HOME') or Path.home())
        xdg = environ.get('XDG_CONFIG_HOME')
        if xdg:
            xdg_config_home = Path(xdg)
        else:
            xdg_config_home = home / '.config'
            logger.debug(f"XDG_CONFIG_HOME not set, using {xdg_config_home}")

        config_file = environ.get(f"{ENV_PREFIX}CONFIG")
        overrides = {
            key: value for key, value in environ.items()
            if key.startswith(ENV_PREFIX) and key != f"{ENV_PREFIX}CONFIG"
        }

        return cls(
            home=home,
            xdg_config_home=xdg_config_home,
            in_tmux=bool(environ.get('TMUX')),
            config_file=Path(config_file).expanduser() if config_file else None,
            overrides=overrides,
        )


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Apply the configured level and format to the projmux logger."""
    if level:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def get_config_path(env: Optional[Environment] = None) -> Path:
    """Get the path to the configuration file.

    Checks in order:
    1. PROJMUX_CONFIG environment variable
    2. $XDG_CONFIG_HOME/projmux/
    3. ~/.projmux/
    """
    if env is None:
        env = Environment.from_env()

    if env.config_file is not None:
        return env.config_file

    candidates = [env.xdg_config_home / 'projmux', env.home / '.projmux']
    for config_dir in candidates:
        for filename in CONFIG_FILENAMES:
            path = config_dir / filename
            if path.exists():
                return path

    # If no file exists, return default path for saving
    return candidates[0] / CONFIG_FILENAMES[0]


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "general": {
            "projects_config": "~/.config/projmux/projects.yml",
            "multiplexer": "tmux",
        },
        "picker": {
            "command": "fzf",
            "args": [],
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None, env: Optional[Environment] = None) -> Dict[str, Any]:
    """Load configuration from file.

    A missing file yields the defaults. An unreadable or malformed file is an
    error: silently running with defaults would point commands at the wrong
    projects file.
    """
    from .exit_codes import ConfigIOError

    if config_path is None:
        config_path = get_config_path(env)

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigIOError(f"could not read config: {e}", str(config_path)) from e

        if file_config is None:
            file_config = {}
        if not isinstance(file_config, dict):
            raise ConfigIOError("config must be a mapping", str(config_path))

        # Merge file config with defaults
        config = merge_configs(config, file_config)
    else:
        logger.debug(f"No config at {config_path}, using defaults")

    # Apply environment variable overrides
    config = apply_env_overrides(config, env)

    return config


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = copy.deepcopy(base_config)

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config, env: Optional[Environment] = None):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: PROJMUX_SECTION_KEY
    For example: PROJMUX_GENERAL_MULTIPLEXER=tmux

    PROJMUX_PROJECTS_CONFIG is accepted as a shortcut for
    general.projects_config.
    """
    if env is None:
        env = Environment.from_env()

    shortcut = env.overrides.get(f"{ENV_PREFIX}PROJECTS_CONFIG")
    if shortcut:
        config.setdefault("general", {})["projects_config"] = shortcut

    for env_key, value in env.overrides.items():
        if env_key == f"{ENV_PREFIX}PROJECTS_CONFIG":
            continue

        key_parts = env_key[len(ENV_PREFIX):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config


def expand_path(value, base: Optional[Path] = None) -> Path:
    """Expand ~ and $VARS in a configured path, anchoring relative paths at base."""
    path = Path(os.path.expandvars(os.path.expanduser(str(value))))
    if base is not None and not path.is_absolute():
        path = base / path
    return path
