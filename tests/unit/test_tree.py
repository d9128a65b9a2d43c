"""Tests for flattening and building trees."""

import pytest

from grove.core.errors import InvalidReference, ObjectNotFound, PathConflict
from grove.core.index import Index
from grove.core.objects import Blob, Tree, MODE_EXECUTABLE, MODE_FILE, MODE_TREE
from grove.operations.tree import build, build_from_index, flatten, read_tree, tree_of


@pytest.fixture
def blobs(repo):
    return {name: repo.objects.write(Blob(name.encode())) for name in ('a', 'b', 'c', 'd')}


def test_build_nested(repo, blobs):
    flat = {
        'README': (MODE_FILE, blobs['a']),
        'src/main.py': (MODE_FILE, blobs['b']),
        'src/util/io.py': (MODE_EXECUTABLE, blobs['c']),
    }
    root = read_tree(repo.objects, build(repo.objects, flat))

    assert [e.name for e in root.entries] == ['README', 'src']
    src = read_tree(repo.objects, root.get('src').hash)
    assert src.get('main.py').hash == blobs['b']
    assert src.get('util').mode == MODE_TREE


def test_flatten_inverts_build(repo, blobs):
    flat = {
        'a.txt': (MODE_FILE, blobs['a']),
        'a/b.txt': (MODE_FILE, blobs['b']),
        'a/c/d.sh': (MODE_EXECUTABLE, blobs['c']),
        'z': (MODE_FILE, blobs['d']),
    }
    tree_hash = build(repo.objects, flat)
    assert flatten(repo.objects, tree_hash) == flat
    assert build(repo.objects, flatten(repo.objects, tree_hash)) == tree_hash


def test_build_independent_of_order(repo, blobs):
    items = [
        ('x/1', (MODE_FILE, blobs['a'])),
        ('x/2', (MODE_FILE, blobs['b'])),
        ('y', (MODE_FILE, blobs['c'])),
    ]
    forward = build(repo.objects, dict(items))
    backward = build(repo.objects, dict(reversed(items)))
    assert forward == backward


def test_unchanged_subtree_reused(repo, blobs):
    first = read_tree(repo.objects, build(repo.objects, {
        'lib/a': (MODE_FILE, blobs['a']),
        'top': (MODE_FILE, blobs['b']),
    }))
    second = read_tree(repo.objects, build(repo.objects, {
        'lib/a': (MODE_FILE, blobs['a']),
        'top': (MODE_FILE, blobs['c']),
    }))
    assert first.get('lib').hash == second.get('lib').hash
    assert first.get('top').hash != second.get('top').hash


def test_empty_build(repo):
    assert build(repo.objects, {}) == Tree().hash


def test_file_and_directory_conflict(repo, blobs):
    with pytest.raises(PathConflict):
        build(repo.objects, {
            'a': (MODE_FILE, blobs['a']),
            'a/b': (MODE_FILE, blobs['b']),
        })


@pytest.mark.parametrize('path', ['dir/', 'a//b', '/abs', './x'])
def test_unnormalized_path_rejected(repo, blobs, path):
    with pytest.raises(PathConflict):
        build(repo.objects, {path: (MODE_FILE, blobs['a'])})


def test_flatten_missing_subtree(repo, blobs):
    tree = Tree()
    tree.add_entry(MODE_TREE, 'gone', '1' * 40)
    tree_hash = repo.objects.write(tree)
    with pytest.raises(ObjectNotFound):
        flatten(repo.objects, tree_hash)


def test_build_from_index(repo, blobs):
    index = Index()
    index.upsert('d/f', blobs['a'], MODE_FILE)
    tree_hash = build_from_index(repo.objects, index)
    assert flatten(repo.objects, tree_hash) == {'d/f': (MODE_FILE, blobs['a'])}


def test_tree_of(repo, blobs, sample_commit):
    commit_hash = repo.objects.write(sample_commit)
    assert tree_of(repo.objects, commit_hash) == sample_commit.tree
    assert tree_of(repo.objects, sample_commit.tree) == sample_commit.tree
    with pytest.raises(InvalidReference):
        tree_of(repo.objects, blobs['a'])
