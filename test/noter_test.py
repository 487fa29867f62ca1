import unittest.mock

import pytest

import patchnotes.config as pc
import patchnotes.gitutil as pg
import patchnotes.model as pm
import patchnotes.noter as examinee
import patchnotes.producer as pp


@pytest.fixture
def repository():
    repository = unittest.mock.MagicMock(spec=pg.RepositoryBase)
    repository.current_branch.return_value = 'release-1.23'
    repository.tags_for_branch.return_value = ['v1.23.0', 'v1.23.1', 'v1.23.0-alpha.2']
    repository.head.return_value = 'someHash'
    return repository


@pytest.fixture
def producer():
    producer = unittest.mock.MagicMock(spec=pp.NotesProducerBase)
    producer.produce.return_value = 'some output'
    return producer


def test_markdown(repository, producer):
    opened_paths = []

    def repo_opener(path):
        opened_paths.append(path)
        return repository

    release_noter = examinee.ReleaseNoter(
        repo_dir='/some/dir/k8s',
        producer=producer,
        repo_opener=repo_opener,
    )

    assert release_noter.markdown() == (
        'some output'
        '\n\n----\n\n### some pending PRs'
        '\n\n----\n\n### find a green build'
    )
    assert opened_paths == ['/some/dir/k8s']
    producer.produce.assert_called_once_with(pm.RevisionRange(
        start='v1.23.0',
        end='someHash',
        branch='release-1.23',
    ))


def test_markdown_repo_opener_fails(producer):
    def repo_opener(path):
        raise pm.RepositoryError(f'opening git-repository at {path=}')

    release_noter = examinee.ReleaseNoter(
        repo_dir='/some/dir/k8s',
        producer=producer,
        repo_opener=repo_opener,
    )

    with pytest.raises(pm.RepositoryError) as excinfo:
        release_noter.markdown()

    assert excinfo.value.query == 'opening repo'
    producer.produce.assert_not_called()


def test_markdown_no_release_tag(repository, producer):
    repository.tags_for_branch.return_value = ['v1.23.0-alpha.2']
    release_noter = examinee.ReleaseNoter(
        repo_dir='/some/dir/k8s',
        producer=producer,
        repo_opener=lambda path: repository,
    )

    with pytest.raises(pm.NoReleaseTagFoundError):
        release_noter.markdown()

    producer.produce.assert_not_called()


def test_markdown_producer_fails(repository, producer):
    producer.produce.side_effect = pm.ExternalToolError(
        summary='relnotes exited with result.returncode=1',
        full_error='stderr:\nsome random error',
    )
    release_noter = examinee.ReleaseNoter(
        repo_dir='/some/dir/k8s',
        producer=producer,
        repo_opener=lambda path: repository,
    )

    with pytest.raises(pm.ExternalToolError) as excinfo:
        release_noter.markdown()

    assert str(excinfo.value) == (
        'gathering release notes: relnotes exited with result.returncode=1'
    )
    assert 'some random error' in excinfo.value.full_error
    assert excinfo.value.__cause__ is producer.produce.side_effect


def test_markdown_render_error_gets_context(repository, producer):
    producer.produce.side_effect = pm.RenderError(
        stage=pm.RenderStage.RENDERING,
        message='some render failure',
    )
    release_noter = examinee.ReleaseNoter(
        repo_dir='/some/dir/k8s',
        producer=producer,
        repo_opener=lambda path: repository,
    )

    with pytest.raises(pm.RenderError) as excinfo:
        release_noter.markdown()

    assert excinfo.value.stage is pm.RenderStage.RENDERING
    assert str(excinfo.value) == 'rendering: gathering release notes: some render failure'
    assert excinfo.value.__cause__ is producer.produce.side_effect


def test_producer_from_cfg():
    cfg = pc.ReleaseNoterCfg(
        repo_dir='/some/dir/k8s',
        release_tools_dir='/some/dir/release',
        github_token='some github token',
    )

    producer = examinee.producer_from_cfg(cfg=cfg)

    assert isinstance(producer, pp.CommandNotesProducer)
    assert producer.repo_dir == '/some/dir/k8s'
    assert producer.release_tools_dir == '/some/dir/release'
    assert producer.github_token == 'some github token'

    cfg.producer = pc.ProducerMode.GATHERER
    cfg.github_org = 'gardener'
    gatherer = unittest.mock.MagicMock(spec=pp.NoteGathererBase)

    producer = examinee.producer_from_cfg(cfg=cfg, gatherer=gatherer)

    assert isinstance(producer, pp.GathererNotesProducer)
    assert producer.gatherer is gatherer
    assert producer.github_org == 'gardener'


def test_producer_from_cfg_requires_gatherer():
    cfg = pc.ReleaseNoterCfg(producer=pc.ProducerMode.GATHERER)

    with pytest.raises(ValueError):
        examinee.producer_from_cfg(cfg=cfg)


def test_release_noter_from_cfg(repository):
    command_runner = unittest.mock.MagicMock()
    command_runner.return_value.returncode = 0
    command_runner.return_value.stdout = '# notes'
    command_runner.return_value.stderr = ''

    release_noter = examinee.release_noter_from_cfg(
        cfg=pc.ReleaseNoterCfg(repo_dir='/some/dir/k8s'),
        command_runner=command_runner,
        repo_opener=lambda path: repository,
    )

    assert release_noter.markdown().startswith('# notes\n\n----\n\n')
    assert command_runner.call_args.kwargs['cwd'] == '/some/dir/k8s'
