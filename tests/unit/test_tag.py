"""Tests for lightweight and annotated tags."""

import pytest

from grove.core.errors import InvalidReference
from grove.core.objects import Tag
from grove.operations.tag import create_tag
from tests.conftest import make_commit, TEST_AUTHOR


def test_lightweight_tag(repo):
    commit_hash = make_commit(repo, {'a': 'a'})
    assert create_tag(repo, 'v1') == commit_hash
    assert repo.refs.read_ref('refs/tags/v1') == commit_hash


def test_annotated_tag(repo):
    commit_hash = make_commit(repo, {'a': 'a'})
    tag_hash = create_tag(repo, 'v1', message='Release', tagger=TEST_AUTHOR, timestamp=10)

    tag = repo.objects.read(tag_hash)
    assert isinstance(tag, Tag)
    assert tag.object == commit_hash
    assert tag.object_kind == 'commit'
    assert tag.message == 'Release\n'
    assert repo.refs.resolve_commit('v1') == commit_hash


def test_tag_existing_name(repo):
    make_commit(repo, {'a': 'a'})
    create_tag(repo, 'v1')
    with pytest.raises(InvalidReference):
        create_tag(repo, 'v1')


def test_force_moves_tag(repo):
    first = make_commit(repo, {'a': '1'})
    create_tag(repo, 'v1')
    second = make_commit(repo, {'a': '22'})
    assert create_tag(repo, 'v1', force=True) == second
    assert create_tag(repo, 'old', first) == first


def test_invalid_tag_name(repo):
    make_commit(repo, {'a': 'a'})
    with pytest.raises(InvalidReference):
        create_tag(repo, 'bad name')


def test_tag_without_commits(repo):
    with pytest.raises(InvalidReference):
        create_tag(repo, 'v1')
