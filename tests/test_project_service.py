"""Tests for ProjectService: scanning, reporting, importing and new projects."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from projmux.domain import ConfigProject
from projmux.exit_codes import (
    ConfigIOError,
    NoItemSelectedError,
    NoItemsFoundError,
    NoProjectSelectedError,
    ProjectAlreadyTrackedError,
    ProjectPathDoesNotExistError,
    SubprocessIOError,
)
from projmux.infra import FzfPicker, GitClient
from projmux.services import ProjectService

from conftest import FakeRunner, fail, ok, write_yaml


def git_with_remotes(remotes):
    """GitClient whose `remote get-url` answers from a {dirname: url} map."""
    def handler(args, cwd=None, **kwargs):
        if args[:3] == ['git', 'remote', 'get-url']:
            url = remotes.get(Path(cwd).name)
            return ok(url + "\n") if url else fail("error: No such remote 'origin'", returncode=2)
        return None
    runner = FakeRunner(handler=handler)
    return GitClient(runner=runner), runner


def make_service(remotes=None, picker=None):
    git, runner = git_with_remotes(remotes or {})
    service = ProjectService(git_client=git, picker=picker or MagicMock(spec=FzfPicker))
    return service, runner


class TestLoad:

    def test_load_filters(self, project_tree):
        service, _ = make_service()
        directory = service.load(project_tree, ['prod'])
        assert [p.remote for p in directory.projects] == ['git@github.com:user/test1.git']

    def test_load_without_tags(self, project_tree):
        service, _ = make_service()
        assert len(service.load(project_tree).projects) == 2


class TestGetProjectsFromFs:
    """Tests for the filesystem scan."""

    def test_tracked_and_ignored_cover_every_directory(self, tmp_path):
        root = tmp_path / 'src'
        for name in ['zeta', 'alpha', 'no-remote', 'weird-remote']:
            (root / name).mkdir(parents=True)
        (root / 'README.md').write_text('not a project')

        service, _ = make_service({
            'zeta': 'git@github.com:user/zeta.git',
            'alpha': 'https://github.com/user/alpha',
            'weird-remote': '/srv/git/local.git',
        })
        projects, ignored = service.get_projects_from_fs(root)

        assert [p.name for p in projects] == ['alpha', 'zeta']
        assert ignored == [root / 'no-remote', root / 'weird-remote']
        assert len(projects) + len(ignored) == 4

    def test_entry_that_cannot_be_queried_is_ignored(self, tmp_path):
        root = tmp_path / 'src'
        for name in ['good', 'vanished']:
            (root / name).mkdir(parents=True)

        def handler(args, cwd=None, **kwargs):
            if Path(cwd).name == 'vanished':
                raise SubprocessIOError(args, "No such file or directory")
            return ok("git@github.com:user/good.git\n")

        service = ProjectService(git_client=GitClient(runner=FakeRunner(handler=handler)),
                                 picker=MagicMock(spec=FzfPicker))
        projects, ignored = service.get_projects_from_fs(root)

        assert [p.name for p in projects] == ['good']
        assert ignored == [root / 'vanished']

    def test_directory_name_wins_when_it_differs(self, tmp_path):
        root = tmp_path / 'src'
        (root / 'renamed').mkdir(parents=True)
        service, _ = make_service({'renamed': 'git@github.com:user/original.git'})

        projects, _ = service.get_projects_from_fs(root)

        assert projects[0].name == 'renamed'
        assert projects[0].path == root / 'renamed'
        assert projects[0].git_uri.name == 'original'

    def test_missing_root(self, tmp_path):
        service, _ = make_service()
        with pytest.raises(ProjectPathDoesNotExistError):
            service.get_projects_from_fs(tmp_path / 'missing')

    def test_git_asked_for_origin(self, tmp_path):
        (tmp_path / 'one').mkdir()
        service, runner = make_service({'one': 'git@github.com:user/one.git'})
        service.get_projects_from_fs(tmp_path)
        args, kwargs = runner.calls[0]
        assert args == ['git', 'remote', 'get-url', 'origin']
        assert Path(kwargs['cwd']) == tmp_path / 'one'


class TestReport:

    def test_report(self, project_tree, tmp_path):
        src = tmp_path / 'src'
        for name in ['test1', 'untracked', 'plain']:
            (src / name).mkdir(parents=True)
        service, _ = make_service({
            'test1': 'git@github.com:user/test1.git',
            'untracked': 'git@github.com:user/untracked.git',
        })

        report = service.report(service.load(project_tree))

        assert report.projects_directory == src
        assert [p.name for p in report.fs_projects] == ['test1', 'untracked']
        assert [p.name for p in report.config_projects] == ['test3', 'test1']
        assert [p.name for p in report.untracked] == ['untracked']
        assert report.ignored == [src / 'plain']

        data = report.to_dict()
        assert data['file_system'] == 2
        assert data['config_list'] == 2
        assert data['not_tracked'] == ['untracked']
        assert data['ignored'] == [str(src / 'plain')]


class TestImport:

    def test_candidates_exclude_tracked_remotes(self, project_tree, tmp_path):
        src = tmp_path / 'src'
        for name in ['test1', 'fresh']:
            (src / name).mkdir(parents=True)
        service, _ = make_service({
            'test1': 'git@github.com:user/test1.git',
            'fresh': 'git@github.com:user/fresh.git',
        })

        candidates = service.import_candidates(service.load(project_tree))

        assert candidates == [ConfigProject('git@github.com:user/fresh.git')]

    def test_candidates_from_other_directory(self, project_tree, tmp_path):
        other = tmp_path / 'elsewhere'
        (other / 'x').mkdir(parents=True)
        service, _ = make_service({'x': 'git@github.com:user/x.git'})

        candidates = service.import_candidates(service.load(project_tree), other)

        assert [c.remote for c in candidates] == ['git@github.com:user/x.git']

    def test_pick_projects_none_picked(self):
        picker = MagicMock(spec=FzfPicker)
        picker.pick_many.return_value = []
        service, _ = make_service(picker=picker)
        with pytest.raises(NoProjectSelectedError):
            service.pick_projects([ConfigProject('git@github.com:user/x.git')])

    def test_pick_projects_empty_candidates(self):
        picker = MagicMock(spec=FzfPicker)
        picker.pick_many.side_effect = NoItemsFoundError()
        service, _ = make_service(picker=picker)
        with pytest.raises(NoItemsFoundError):
            service.pick_projects([])

    def test_plan_add_does_not_write(self, project_tree):
        before = project_tree.read_text()
        service, _ = make_service()

        change = service.plan_add(project_tree, [ConfigProject('git@github.com:user/new.git')])

        assert project_tree.read_text() == before
        assert change.before == before
        assert ('+', '- remote: git@github.com:user/new.git') in change.diff_lines()

    def test_apply_writes_and_resolves(self, project_tree):
        service, _ = make_service()
        change = service.plan_add(project_tree, [ConfigProject('git@github.com:user/new.git')])
        service.apply(change)

        directory = service.load(project_tree)
        assert directory.remotes() == [
            'git@github.com:user/test3.git',
            'git@github.com:user/test1.git',
            'git@github.com:user/new.git',
        ]

    def test_plan_add_to_file_without_include(self, tmp_path):
        root = write_yaml(tmp_path / 'projects.yml', "projects_directory: src\n")
        service, _ = make_service()
        change = service.plan_add(root, [ConfigProject('git@github.com:user/new.git')])
        assert 'include:' in change.after

    def test_plan_add_missing_file(self, tmp_path):
        service, _ = make_service()
        with pytest.raises(ConfigIOError):
            service.plan_add(tmp_path / 'nope.yml', [])


class TestPickProject:

    def test_abort_is_no_project_selected(self, project_tree):
        picker = MagicMock(spec=FzfPicker)
        picker.pick_one.side_effect = NoItemSelectedError()
        service, _ = make_service(picker=picker)
        projects = service.load(project_tree).get_projects_from_remotes()
        with pytest.raises(NoProjectSelectedError):
            service.pick_project(projects)

    def test_pick(self, project_tree):
        picker = MagicMock(spec=FzfPicker)
        picker.pick_one.side_effect = lambda items: items[1]
        service, _ = make_service(picker=picker)
        projects = service.load(project_tree).get_projects_from_remotes()
        assert service.pick_project(projects).name == 'test1'


class TestNewProject:

    def test_already_tracked(self, project_tree):
        service, runner = make_service()
        with pytest.raises(ProjectAlreadyTrackedError):
            service.new_project(service.load(project_tree), 'git@github.com:user/test1.git')
        assert runner.calls == []

    def test_tracked_through_group_file(self, project_tree):
        service, _ = make_service()
        directory = service.load(project_tree)
        with pytest.raises(ProjectAlreadyTrackedError):
            service.new_project(directory, 'git@github.com:user/test3.git')

    def test_clone(self, project_tree, tmp_path):
        service, runner = make_service()
        project, succeeded = service.new_project(service.load(project_tree), 'git@github.com:user/new.git')

        assert succeeded
        assert project == ConfigProject('git@github.com:user/new.git')
        args, kwargs = runner.calls[-1]
        assert args == ['git', 'clone', 'git@github.com:user/new.git']
        assert Path(kwargs['cwd']) == tmp_path / 'src'

    def test_clone_failure_still_returns_project(self, project_tree):
        git = GitClient(runner=FakeRunner(handler=lambda args, **kw: fail("fatal: repository not found", 128)))
        service = ProjectService(git_client=git, picker=MagicMock(spec=FzfPicker))

        project, succeeded = service.new_project(service.load(project_tree), 'git@github.com:user/gone.git')

        assert not succeeded
        assert project.remote == 'git@github.com:user/gone.git'

    def test_init(self, project_tree, tmp_path):
        service, runner = make_service()
        project, succeeded = service.new_project(
            service.load(project_tree), 'git@github.com:user/idea.git', init=True)

        target = tmp_path / 'src' / 'idea'
        assert succeeded
        assert target.is_dir()
        assert runner.commands == [
            ['git', 'init'],
            ['git', 'remote', 'add', 'origin', 'git@github.com:user/idea.git'],
        ]
        assert all(Path(kw['cwd']) == target for _, kw in runner.calls)

    def test_init_existing_repository(self, project_tree, tmp_path):
        (tmp_path / 'src' / 'idea' / '.git').mkdir(parents=True)
        service, runner = make_service()
        service.new_project(service.load(project_tree), 'git@github.com:user/idea.git', init=True)
        assert runner.calls == []
