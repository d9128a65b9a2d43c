"""Shared pytest fixtures for Grove tests."""

import os
import pytest
import tempfile
import shutil
from pathlib import Path

from grove.core.config import Config
from grove.core.repository import Repository
from grove.core.objects import Blob, Tree, Commit, MODE_FILE
from grove.operations.commit import commit

FIXED_TIME = 1700000000
TEST_AUTHOR = "Test User <test@example.com>"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.groveconfig and GROVE_* variables."""
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', tmp_path / '.groveconfig')
    for name in list(os.environ):
        if name.startswith('GROVE_'):
            monkeypatch.delenv(name)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def repo_with_config(repo):
    """Create a repository with a user identity configured."""
    with open(repo.config_file, 'a') as f:
        f.write("[user]\nname = Test User\nemail = test@example.com\n")
    return repo


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = repo.objects.write(sample_blob)
    tree = Tree()
    tree.add_entry(MODE_FILE, 'test.txt', blob_hash)
    return tree


@pytest.fixture
def sample_commit(sample_tree, repo):
    """Sample commit object."""
    tree_hash = repo.objects.write(sample_tree)
    return Commit.create(
        tree_hash=tree_hash,
        parent_hashes=[],
        author=TEST_AUTHOR,
        committer=TEST_AUTHOR,
        message="Test commit\n",
        timestamp=FIXED_TIME,
    )


@pytest.fixture
def working_files(repo):
    """Create sample file structure in repository."""
    file1 = repo.work_tree / "test1.txt"
    file2 = repo.work_tree / "test2.txt"
    (repo.work_tree / "subdir").mkdir()
    file3 = repo.work_tree / "subdir" / "test3.txt"

    file1.write_text("Content 1")
    file2.write_text("Content 2")
    file3.write_text("Content 3")

    return {
        'file1': file1,
        'file2': file2,
        'file3': file3
    }


def stage(repo, *paths):
    """Add working files to the on-disk index."""
    index = repo.load_index()
    for path in paths:
        index.add_file(repo, repo.work_tree / path)
    repo.save_index(index)
    return index


def make_commit(repo, files, message="Test commit"):
    """
    Write files into the work tree, stage them and commit.

    Args:
        repo: Repository instance
        files: dict of repository path -> text content
        message: Commit message

    Returns:
        str: Commit hash
    """
    for path, content in files.items():
        full_path = repo.work_tree / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)
    stage(repo, *files)
    return commit(repo, message, author=TEST_AUTHOR, timestamp=FIXED_TIME, timezone='+0000')


@pytest.fixture
def repo_with_commits(repo_with_config):
    """Repository with two commits on main."""
    repo = repo_with_config
    make_commit(repo, {'file1.txt': 'Hello, World!'}, "First commit")
    make_commit(repo, {'file2.txt': 'Second file'}, "Second commit")
    return repo
