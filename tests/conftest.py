"""Shared fixtures for projmux tests."""

from pathlib import Path

import pytest

from projmux.infra.process import ProcessResult


class FakeRunner:
    """
    Stand-in for run_process that records calls.

    Responses are looked up by the full argument tuple first, then by a
    handler callable, and default to a successful empty result.
    """

    def __init__(self, responses=None, handler=None):
        self.responses = dict(responses or {})
        self.handler = handler
        self.calls = []

    def __call__(self, args, **kwargs):
        args = [str(a) for a in args]
        self.calls.append((args, kwargs))
        key = tuple(args)
        if key in self.responses:
            return self.responses[key]
        if self.handler is not None:
            result = self.handler(args, **kwargs)
            if result is not None:
                return result
        return ProcessResult(args=args, returncode=0)

    @property
    def commands(self):
        return [args for args, _ in self.calls]


def ok(stdout="", args=None):
    return ProcessResult(args=args or [], returncode=0, stdout=stdout)


def fail(stderr="", returncode=1, args=None):
    return ProcessResult(args=args or [], returncode=returncode, stderr=stderr)


def write_yaml(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def project_tree(tmp_path):
    """
    Root file including a tagged group file and a direct project.

    Returns the root file path.
    """
    write_yaml(tmp_path / "groups" / "grouped.yml", """\
tags: [grouped]
include:
  - remote: git@github.com:user/test3.git
    tags: [test3]
""")
    return write_yaml(tmp_path / "projects.yml", f"""\
projects_directory: {tmp_path / 'src'}
include:
  - groups/grouped.yml
  - remote: git@github.com:user/test1.git
    tags: [tester_repo, prod]
""")
