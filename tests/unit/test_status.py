"""Tests for status computation."""

import os

from grove.operations.status import FileStatus, compute_status
from grove.utils.ignore import IgnoreMatcher
from tests.conftest import make_commit, stage


def test_empty_repository_is_clean(repo):
    report = compute_status(repo)
    assert report.is_clean()
    assert report.head_commit is None


def test_untracked(repo):
    (repo.work_tree / 'new.txt').write_text('x')
    report = compute_status(repo)
    assert report.statuses('new.txt') == [FileStatus.UNTRACKED]


def test_staged_new(repo):
    (repo.work_tree / 'a.txt').write_text('a')
    stage(repo, 'a.txt')
    report = compute_status(repo)
    assert report.statuses('a.txt') == [FileStatus.STAGED_NEW]
    assert report.has_staged_changes()


def test_clean_after_commit(repo):
    make_commit(repo, {'a.txt': 'a', 'dir/b.txt': 'b'})
    report = compute_status(repo)
    assert report.is_clean()
    assert report.statuses('dir/b.txt') == [FileStatus.UNMODIFIED]


def test_unstaged_modified(repo):
    make_commit(repo, {'a.txt': 'a'})
    (repo.work_tree / 'a.txt').write_text('changed')
    report = compute_status(repo)
    assert report.statuses('a.txt') == [FileStatus.UNSTAGED_MODIFIED]


def test_staged_then_modified_again(repo):
    make_commit(repo, {'a.txt': 'a'})
    (repo.work_tree / 'a.txt').write_text('bb')
    stage(repo, 'a.txt')
    (repo.work_tree / 'a.txt').write_text('ccc')
    report = compute_status(repo)
    assert report.statuses('a.txt') == [FileStatus.STAGED_MODIFIED, FileStatus.UNSTAGED_MODIFIED]


def test_unstaged_deleted(repo):
    make_commit(repo, {'a.txt': 'a'})
    (repo.work_tree / 'a.txt').unlink()
    report = compute_status(repo)
    assert report.paths(FileStatus.UNSTAGED_DELETED) == ['a.txt']


def test_staged_deleted(repo):
    make_commit(repo, {'a.txt': 'a', 'b.txt': 'b'})
    index = repo.load_index()
    index.remove('a.txt')
    repo.save_index(index)
    report = compute_status(repo)
    assert report.statuses('a.txt') == [FileStatus.STAGED_DELETED, FileStatus.UNTRACKED]


def test_mode_change_detected(repo):
    make_commit(repo, {'run.sh': 'echo'})
    (repo.work_tree / 'run.sh').chmod(0o755)
    report = compute_status(repo)
    assert FileStatus.UNSTAGED_MODIFIED in report.statuses('run.sh')


def test_touched_but_identical_is_unmodified(repo):
    """A stat mismatch triggers a re-hash, which finds no change."""
    make_commit(repo, {'a.txt': 'a'})
    path = repo.work_tree / 'a.txt'
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 5 * 10**9))
    assert compute_status(repo).statuses('a.txt') == [FileStatus.UNMODIFIED]


def test_stat_match_hides_same_size_edit(repo):
    """Same size plus restored mtime passes the stat check; force_hash catches it."""
    make_commit(repo, {'a.txt': 'aaaa'})
    path = repo.work_tree / 'a.txt'
    st = path.stat()
    with open(path, 'r+') as f:
        f.write('bbbb')
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns))

    assert compute_status(repo).statuses('a.txt') == [FileStatus.UNMODIFIED]
    forced = compute_status(repo, force_hash=True)
    assert forced.statuses('a.txt') == [FileStatus.UNSTAGED_MODIFIED]


def test_internal_paths_not_reported(repo):
    report = compute_status(repo)
    assert not any(p.startswith('.grove') for p in report.entries)


def test_ignored_files_skipped(repo):
    (repo.work_tree / '.groveignore').write_text('*.log\nbuild/\n')
    (repo.work_tree / 'debug.log').write_text('x')
    (repo.work_tree / 'build').mkdir()
    (repo.work_tree / 'build' / 'out.o').write_text('x')
    (repo.work_tree / 'keep.txt').write_text('x')

    untracked = compute_status(repo).paths(FileStatus.UNTRACKED)
    assert untracked == ['.groveignore', 'keep.txt']


def test_explicit_ignore_matcher(repo):
    (repo.work_tree / 'a.tmp').write_text('x')
    matcher = IgnoreMatcher()
    matcher.add_pattern('*.tmp')
    assert compute_status(repo, ignore_matcher=matcher).is_clean()


def test_tracked_file_not_hidden_by_ignore(repo):
    make_commit(repo, {'app.log': 'x'})
    (repo.work_tree / '.groveignore').write_text('*.log\n')
    (repo.work_tree / 'app.log').write_text('changed')
    report = compute_status(repo)
    assert FileStatus.UNSTAGED_MODIFIED in report.statuses('app.log')


def test_changed_paths_in_byte_order(repo):
    for name in ['b', 'a/x', 'a.txt']:
        path = repo.work_tree / name
        path.parent.mkdir(exist_ok=True)
        path.write_text('x')
    assert list(compute_status(repo).changed_paths()) == ['a.txt', 'a/x', 'b']
