"""
Git remote URI parsing.

Supports the two families of remotes seen in project configs:

    SSH (scp-like):  git@github.com:owner/name.git
    URL:             https://github.com/owner/name
                     ssh://git@host:2222/owner/name.git
                     git://host/owner/name.git

The owner may contain slashes (GitLab subgroups: group/sub/name).
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exit_codes import RemoteNotParsableError

_URL_RE = re.compile(
    r"^(?P<scheme>https?|ssh|git)://"
    r"(?:(?P<user>[^@/]+)@)?"
    r"(?P<host>[^/:]+)"
    r"(?::(?P<port>\d+))?"
    r"/(?P<path>.+?)/?$"
)

_SCP_RE = re.compile(
    r"^(?:(?P<user>[^@/:]+)@)?"
    r"(?P<host>[^/:]+)"
    r":(?!//)(?P<path>[^/].*?)/?$"
)


@dataclass(frozen=True)
class GitUri:
    """Parsed git remote: where it is hosted, who owns it, what it is called."""
    host: str
    owner: str
    name: str
    scheme: str = "ssh"
    user: Optional[str] = None
    port: Optional[int] = None

    @property
    def web_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'host': self.host,
            'owner': self.owner,
            'name': self.name,
        }


def _split_path(path: str):
    if path.endswith('.git'):
        path = path[:-len('.git')]
    parts = [p for p in path.split('/') if p]
    if len(parts) < 2:
        return None
    return '/'.join(parts[:-1]), parts[-1]


def parse_git_uri(remote: str) -> GitUri:
    """
    Parse a git remote into host, owner and repository name.

    Args:
        remote: Remote string as stored in a project config or git config

    Returns:
        GitUri

    Raises:
        RemoteNotParsableError: if the remote matches neither grammar
    """
    if not remote or not isinstance(remote, str):
        raise RemoteNotParsableError(str(remote))

    text = remote.strip()

    url_match = _URL_RE.match(text)
    if url_match:
        split = _split_path(url_match.group('path'))
        if split:
            owner, name = split
            port = url_match.group('port')
            return GitUri(
                host=url_match.group('host'),
                owner=owner,
                name=name,
                scheme=url_match.group('scheme'),
                user=url_match.group('user'),
                port=int(port) if port else None,
            )
        raise RemoteNotParsableError(remote)

    if '://' not in text:
        scp_match = _SCP_RE.match(text)
        if scp_match:
            split = _split_path(scp_match.group('path'))
            if split:
                owner, name = split
                return GitUri(
                    host=scp_match.group('host'),
                    owner=owner,
                    name=name,
                    scheme='ssh',
                    user=scp_match.group('user'),
                )

    raise RemoteNotParsableError(remote)

