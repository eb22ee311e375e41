"""
zoxide lookups for scratch sessions.
"""

import os
from pathlib import Path
from typing import Optional

from .process import Runner, run_process


class ZoxideClient:
    """Resolve a query to a directory through zoxide."""

    def __init__(self, runner: Optional[Runner] = None):
        self.runner = runner or run_process

    def query(self, query: str) -> Optional[Path]:
        """Best match for query, or None when zoxide knows nothing."""
        result = self.runner(['zoxide', 'query', query])
        out = result.stdout.strip()
        if result.ok and out:
            return Path(out)
        return None

    def query_interactive(self, query: str = "") -> Optional[Path]:
        """Let the user pick among zoxide matches, fzf prefilled with query."""
        env = dict(os.environ)
        env['_ZO_FZF_OPTS'] = f"--query={query}"
        args = ['zoxide', 'query', '--interactive']
        if query:
            args.append(query)
        result = self.runner(
            args,
            env=env,
            capture_stderr=False,
        )
        out = result.stdout.strip()
        if result.ok and out:
            return Path(out)
        return None
