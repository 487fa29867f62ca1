import dacite
import pytest
import yaml

import patchnotes.config as examinee
import patchnotes.model as pm


@pytest.fixture
def cfg_file(tmp_path):
    def _cfg_file(raw):
        path = tmp_path / 'patchnotes-cfg.yaml'
        path.write_text(yaml.safe_dump(raw))
        return str(path)

    return _cfg_file


def test_defaults(monkeypatch):
    monkeypatch.delenv('GITHUB_TOKEN', raising=False)

    cfg = examinee.load_cfg()

    assert cfg.repo_dir == '.'
    assert cfg.release_tools_dir == '.'
    assert cfg.producer is examinee.ProducerMode.COMMAND
    assert cfg.github_org == pm.DEFAULT_GITHUB_ORG
    assert cfg.github_repo == pm.DEFAULT_GITHUB_REPO
    assert cfg.github_token is None


def test_load_cfg_from_file(cfg_file, monkeypatch):
    monkeypatch.delenv('GITHUB_TOKEN', raising=False)
    path = cfg_file({
        'repo_dir': '/some/dir/k8s',
        'release_tools_dir': '/some/dir/release',
        'producer': 'gatherer',
        'github_org': 'gardener',
    })

    cfg = examinee.load_cfg(path=path)

    assert cfg.repo_dir == '/some/dir/k8s'
    assert cfg.release_tools_dir == '/some/dir/release'
    assert cfg.producer is examinee.ProducerMode.GATHERER
    assert cfg.github_org == 'gardener'
    assert cfg.github_repo == pm.DEFAULT_GITHUB_REPO


def test_overrides_take_precedence(cfg_file):
    path = cfg_file({
        'repo_dir': '/some/dir/k8s',
        'producer': 'gatherer',
    })

    cfg = examinee.load_cfg(
        path=path,
        repo_dir='/other/dir',
        producer=examinee.ProducerMode.COMMAND,
        release_tools_dir=None, # None does not override
    )

    assert cfg.repo_dir == '/other/dir'
    assert cfg.producer is examinee.ProducerMode.COMMAND
    assert cfg.release_tools_dir == '.'


def test_github_token_from_env(cfg_file, monkeypatch):
    monkeypatch.setenv('GITHUB_TOKEN', 'token-from-env')

    assert examinee.load_cfg().github_token == 'token-from-env'

    path = cfg_file({'github_token': 'token-from-file'})
    assert examinee.load_cfg(path=path).github_token == 'token-from-file'


def test_empty_cfg_file(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text('')

    assert examinee.load_cfg(path=str(path)).repo_dir == '.'


def test_invalid_cfg(cfg_file):
    with pytest.raises(dacite.UnexpectedDataError):
        examinee.load_cfg(path=cfg_file({'unknown_attr': 42}))

    with pytest.raises(ValueError):
        examinee.load_cfg(path=cfg_file({'producer': 'does-not-exist'}))

    with pytest.raises(ValueError):
        examinee.load_cfg(path=cfg_file(['a', 'list']))
