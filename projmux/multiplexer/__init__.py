"""
Terminal multiplexer backends.

Only tmux exists today; new backends subclass Multiplexer and register
in MULTIPLEXERS.
"""

from typing import Dict, Type

from ..exit_codes import ConfigError
from .base import Multiplexer
from .tmux import TmuxMultiplexer

MULTIPLEXERS: Dict[str, Type[Multiplexer]] = {
    'tmux': TmuxMultiplexer,
}


def get_multiplexer(name: str, **kwargs) -> Multiplexer:
    """
    Instantiate a multiplexer backend by name.

    Raises:
        ConfigError: if no backend has that name
    """
    try:
        cls = MULTIPLEXERS[name.lower()]
    except KeyError:
        raise ConfigError(
            f"unknown multiplexer '{name}' (available: {', '.join(sorted(MULTIPLEXERS))})"
        ) from None
    return cls(**kwargs)


__all__ = [
    'Multiplexer',
    'TmuxMultiplexer',
    'MULTIPLEXERS',
    'get_multiplexer',
]
