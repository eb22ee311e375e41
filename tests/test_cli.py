"""
End-to-end tests for the projmux CLI.

Project files are real temp files; git, tmux and fzf are mocked.
"""

import json
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from projmux.cli import cli
from projmux.exit_codes import (
    CONFIG_ERROR,
    NOT_SELECTED,
    NOTHING_FOUND,
    CouldNotCreateSessionError,
)

from conftest import FakeRunner, fail, ok, write_yaml


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv('HOME', str(tmp_path / 'home'))
    monkeypatch.delenv('XDG_CONFIG_HOME', raising=False)
    monkeypatch.delenv('TMUX', raising=False)
    for key in list(os.environ):
        if key.startswith('PROJMUX_'):
            monkeypatch.delenv(key)
    return CliRunner()


def invoke(runner, project_tree, *args, input=None):
    return runner.invoke(cli, [*args[:1], '-p', str(project_tree), *args[1:]], input=input)


def fake_remotes(remotes):
    def handler(args, cwd=None, **kwargs):
        if args[:3] == ['git', 'remote', 'get-url']:
            url = remotes.get(Path(cwd).name)
            return ok(url) if url else fail(returncode=2)
        return None
    return FakeRunner(handler=handler)


class TestList:

    def test_names(self, runner, project_tree):
        result = invoke(runner, project_tree, 'list')
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ['test3', 'test1']

    def test_tags(self, runner, project_tree):
        result = invoke(runner, project_tree, 'list', '-t', 'prod')
        assert result.exit_code == 0
        assert result.output.splitlines() == ['test1']

    def test_no_match_is_empty(self, runner, project_tree):
        result = invoke(runner, project_tree, 'list', '-t', 'nothing', '-o', 'json-raw')
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_json(self, runner, project_tree, tmp_path):
        result = invoke(runner, project_tree, 'list', '-o', 'json')
        data = json.loads(result.output)
        assert data[0]['name'] == 'test3'
        assert data[0]['path'] == str(tmp_path / 'src' / 'test3')
        assert data[0]['tags'] == ['grouped', 'test3']
        assert data[0]['repo_url'] == 'https://github.com/user/test3'

    def test_csv(self, runner, project_tree):
        result = invoke(runner, project_tree, 'list', '-o', 'csv')
        lines = result.output.splitlines()
        assert lines[0] == 'name,safe_name,path,remote,host,owner,tags'
        assert lines[2].endswith('git@github.com:user/test1.git,github.com,user,prod;tester_repo')

    def test_missing_projects_file(self, runner, tmp_path):
        result = runner.invoke(cli, ['list', '-p', str(tmp_path / 'nope.yml')])
        assert result.exit_code == CONFIG_ERROR

    def test_projects_config_from_env(self, runner, project_tree, monkeypatch):
        monkeypatch.setenv('PROJMUX_PROJECTS_CONFIG', str(project_tree))
        result = runner.invoke(cli, ['list'])
        assert result.exit_code == 0
        assert result.output.splitlines() == ['test3', 'test1']


class TestListTags:

    def test_plain(self, runner, project_tree):
        result = invoke(runner, project_tree, 'list-tags')
        assert result.exit_code == 0
        assert result.output.split() == ['grouped', 'prod', 'test3', 'tester_repo']

    def test_json(self, runner, project_tree):
        result = invoke(runner, project_tree, 'list-tags', '-o', 'json-raw')
        assert json.loads(result.output)[0] == {'tag': 'grouped'}


class TestReport:

    def test_report_json(self, runner, project_tree, tmp_path):
        src = tmp_path / 'src'
        for name in ['test1', 'extra', 'plain']:
            (src / name).mkdir(parents=True)
        git_runner = fake_remotes({
            'test1': 'git@github.com:user/test1.git',
            'extra': 'git@github.com:user/extra.git',
        })

        with patch('projmux.infra.git_client.run_process', git_runner):
            result = invoke(runner, project_tree, 'report', '-o', 'json')

        assert result.exit_code == 0, result.output
        report = json.loads(result.output)[0]
        assert report['file_system'] == 2
        assert report['config_list'] == 2
        assert report['not_tracked'] == ['extra']
        assert report['ignored'] == [str(src / 'plain')]

    def test_report_table(self, runner, project_tree, tmp_path):
        (tmp_path / 'src' / 'extra').mkdir(parents=True)
        git_runner = fake_remotes({'extra': 'git@github.com:user/extra.git'})

        with patch('projmux.infra.git_client.run_process', git_runner):
            result = invoke(runner, project_tree, 'report')

        assert result.exit_code == 0, result.output
        assert 'extra' in result.output

    def test_report_missing_projects_directory(self, runner, project_tree):
        result = invoke(runner, project_tree, 'report')
        assert result.exit_code == 1


class TestImport:

    def _setup(self, tmp_path):
        (tmp_path / 'src' / 'extra').mkdir(parents=True)
        return fake_remotes({'extra': 'git@github.com:user/extra.git'})

    def test_declined_writes_nothing(self, runner, project_tree, tmp_path):
        git_runner = self._setup(tmp_path)
        before = project_tree.read_text()

        with patch('projmux.infra.git_client.run_process', git_runner), \
             patch('projmux.infra.fzf.run_process', return_value=ok("git@github.com:user/extra.git\n")):
            result = invoke(runner, project_tree, 'import', input='n\n')

        assert result.exit_code == NOT_SELECTED
        assert project_tree.read_text() == before
        assert '+- remote: git@github.com:user/extra.git' in result.output

    def test_closed_stdin_at_prompt_is_a_decline(self, runner, project_tree, tmp_path):
        git_runner = self._setup(tmp_path)
        before = project_tree.read_text()

        with patch('projmux.infra.git_client.run_process', git_runner), \
             patch('projmux.infra.fzf.run_process', return_value=ok("git@github.com:user/extra.git\n")):
            result = invoke(runner, project_tree, 'import', input='')

        assert result.exit_code == NOT_SELECTED
        assert project_tree.read_text() == before
        assert 'Command failed' not in result.output

    def test_accepted_appends(self, runner, project_tree, tmp_path):
        git_runner = self._setup(tmp_path)

        with patch('projmux.infra.git_client.run_process', git_runner), \
             patch('projmux.infra.fzf.run_process', return_value=ok("git@github.com:user/extra.git\n")):
            result = invoke(runner, project_tree, 'import', input='y\n')

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(project_tree.read_text())
        assert data['include'][-1] == {'remote': 'git@github.com:user/extra.git'}

    def test_nothing_to_import(self, runner, project_tree, tmp_path):
        (tmp_path / 'src').mkdir()
        result = invoke(runner, project_tree, 'import')
        assert result.exit_code == NOTHING_FOUND


class TestNew:

    def test_new_clone_with_yes(self, runner, project_tree, tmp_path):
        git_runner = FakeRunner()
        with patch('projmux.infra.git_client.run_process', git_runner):
            result = invoke(runner, project_tree, 'new', 'git@github.com:user/fresh.git', '--yes')

        assert result.exit_code == 0, result.output
        assert git_runner.commands == [['git', 'clone', 'git@github.com:user/fresh.git']]
        data = yaml.safe_load(project_tree.read_text())
        assert data['include'][-1] == {'remote': 'git@github.com:user/fresh.git'}

    def test_new_already_tracked(self, runner, project_tree):
        result = invoke(runner, project_tree, 'new', 'git@github.com:user/test1.git', '--yes')
        assert result.exit_code == 1
        assert 'already tracked' in result.output

    def test_new_unparsable(self, runner, project_tree):
        result = invoke(runner, project_tree, 'new', 'not-a-remote', '--yes')
        assert result.exit_code == 70


class TestSessions:

    def test_open(self, runner, project_tree, tmp_path):
        (tmp_path / 'src' / 'test1').mkdir(parents=True)
        mux = MagicMock()

        with patch('projmux.infra.fzf.run_process', return_value=ok("test1\n")), \
             patch('projmux.cli_utils.get_multiplexer', return_value=mux):
            result = invoke(runner, project_tree, 'open')

        assert result.exit_code == 0, result.output
        mux.open.assert_called_once_with(tmp_path / 'src' / 'test1', 'test1')

    def test_open_aborted(self, runner, project_tree):
        with patch('projmux.infra.fzf.run_process', return_value=fail(returncode=130)), \
             patch('projmux.cli_utils.get_multiplexer', return_value=MagicMock()):
            result = invoke(runner, project_tree, 'open')
        assert result.exit_code == NOT_SELECTED

    def test_open_session_failure_is_not_fatal(self, runner, project_tree, tmp_path):
        mux = MagicMock()
        mux.open.side_effect = CouldNotCreateSessionError('test1', 'boom')

        with patch('projmux.infra.fzf.run_process', return_value=ok("test1\n")), \
             patch('projmux.cli_utils.get_multiplexer', return_value=mux):
            result = invoke(runner, project_tree, 'open')

        assert result.exit_code == 0

    def test_kill_without_sessions(self, runner):
        mux = MagicMock()
        mux.list_sessions.return_value = []
        with patch('projmux.cli_utils.get_multiplexer', return_value=mux):
            result = runner.invoke(cli, ['kill'])
        assert result.exit_code == NOTHING_FOUND

    def test_scratch_dir_and_zoxide_conflict(self, runner):
        result = runner.invoke(cli, ['scratch', '--dir', '/tmp', '--zoxide', 'x'])
        assert result.exit_code == 2

    def test_unknown_multiplexer(self, runner):
        result = runner.invoke(cli, ['home', '-m', 'screen'])
        assert result.exit_code == CONFIG_ERROR


class TestConfigShow:

    def test_show(self, runner):
        result = runner.invoke(cli, ['config', 'show', '--pretty'])
        assert result.exit_code == 0
        assert json.loads(result.output)['general']['multiplexer'] == 'tmux'

    def test_show_with_config_file(self, runner, tmp_path):
        config = write_yaml(tmp_path / 'cfg.yaml', "general:\n  multiplexer: tmux\n  projects_config: /x.yml\n")
        result = runner.invoke(cli, ['-c', str(config), 'config', 'show'])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output)['general']['projects_config'] == '/x.yml'

    def test_path(self, runner, tmp_path):
        config = tmp_path / 'cfg.yaml'
        result = runner.invoke(cli, ['-c', str(config), 'config', 'show', '--path'])
        assert json.loads(result.output) == {'config_path': str(config)}
