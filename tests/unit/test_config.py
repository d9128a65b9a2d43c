"""Tests for layered configuration."""

import pytest

from grove.core.config import Config, get_config, DEFAULT_USER_NAME, DEFAULT_USER_EMAIL


def test_defaults(repo):
    config = get_config(repo)
    assert config.get_user_identity() == (DEFAULT_USER_NAME, DEFAULT_USER_EMAIL)
    assert config.get_signature() == f"{DEFAULT_USER_NAME} <{DEFAULT_USER_EMAIL}>"


def test_repo_config(repo_with_config):
    assert get_config(repo_with_config).get_user_identity() == ("Test User", "test@example.com")


def test_repo_overrides_global(repo):
    Config().set('user', 'name', 'Global Name', global_config=True)
    assert get_config(repo).get('user', 'name') == 'Global Name'

    get_config(repo).set('user', 'name', 'Repo Name')
    assert get_config(repo).get('user', 'name') == 'Repo Name'


def test_environment_overrides_files(repo_with_config, monkeypatch):
    monkeypatch.setenv('GROVE_USER_NAME', 'Env Name')
    assert get_config(repo_with_config).get('user', 'name') == 'Env Name'


def test_fallback():
    assert Config().get('missing', 'key', 'fallback') == 'fallback'


def test_set_without_repo():
    with pytest.raises(ValueError):
        Config().set('user', 'name', 'x')


def test_set_keeps_existing_sections(repo):
    get_config(repo).set('user', 'email', 'x@y')
    assert get_config(repo).get('core', 'bare') == 'false'


def test_unset(repo_with_config):
    config = get_config(repo_with_config)
    assert config.unset('user', 'email') is True
    assert config.unset('user', 'email') is False
    assert get_config(repo_with_config).get('user', 'email') is None
    assert get_config(repo_with_config).get('user', 'name') == 'Test User'
