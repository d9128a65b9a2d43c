"""Three-way status: HEAD tree vs index vs working directory.

Working files are compared with their index entries by stat metadata
first (mtime, size, inode, executable bit). Only when that disagrees is
the file re-hashed. A stat match is accepted as "unchanged": an edit that
keeps the size and restores the mtime is not noticed unless the caller
passes ``force_hash=True``.
"""

import enum
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from grove.core.hash import hash_file
from grove.core.index import normalize_mode
from grove.core.objects import fs_encode
from grove.operations.tree import flatten, tree_of
from grove.utils.ignore import get_ignore_matcher

logger = logging.getLogger(__name__)


class FileStatus(enum.Enum):
    UNMODIFIED = 'unmodified'
    STAGED_NEW = 'staged-new'
    STAGED_MODIFIED = 'staged-modified'
    STAGED_DELETED = 'staged-deleted'
    UNSTAGED_MODIFIED = 'unstaged-modified'
    UNSTAGED_DELETED = 'unstaged-deleted'
    UNTRACKED = 'untracked'

    @property
    def is_staged(self) -> bool:
        return self in (FileStatus.STAGED_NEW, FileStatus.STAGED_MODIFIED, FileStatus.STAGED_DELETED)

    @property
    def is_unstaged(self) -> bool:
        return self in (FileStatus.UNSTAGED_MODIFIED, FileStatus.UNSTAGED_DELETED)


@dataclass
class StatusReport:
    """
    Classification of every path seen in HEAD, the index or the work tree.

    A path carries at most one staged and one unstaged status (a file can
    be staged-modified and then edited again), or a single UNMODIFIED or
    UNTRACKED status.
    """
    entries: Dict[str, List[FileStatus]] = field(default_factory=dict)
    head_commit: Optional[str] = None

    def add(self, path: str, status: FileStatus) -> None:
        self.entries.setdefault(path, []).append(status)

    def paths(self, status: FileStatus) -> List[str]:
        """Paths carrying the given status, in raw-byte order."""
        return [p for p in self._ordered() if status in self.entries[p]]

    def statuses(self, path: str) -> List[FileStatus]:
        return list(self.entries.get(path, []))

    def changed_paths(self) -> Dict[str, List[FileStatus]]:
        """Every path except the unmodified ones."""
        return {
            p: self.entries[p] for p in self._ordered()
            if self.entries[p] != [FileStatus.UNMODIFIED]
        }

    def has_staged_changes(self) -> bool:
        return any(s.is_staged for statuses in self.entries.values() for s in statuses)

    def is_clean(self) -> bool:
        return not self.changed_paths()

    def _ordered(self) -> List[str]:
        return sorted(self.entries, key=fs_encode)


def head_files(repo) -> Dict[str, tuple]:
    """Flattened tree of the HEAD commit; empty when there are no commits."""
    head = repo.refs.resolve_head()
    if head is None:
        return {}
    return flatten(repo.objects, tree_of(repo.objects, head))


def working_files(repo, ignore_matcher=None) -> List[str]:
    """
    All regular files in the work tree as repository paths.

    The control directory, the guard file and ignored paths are skipped.
    """
    if ignore_matcher is None:
        ignore_matcher = get_ignore_matcher(repo.work_tree)

    found = []
    root = str(repo.work_tree)
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root).replace(os.sep, '/')
        rel_dir = '' if rel_dir == '.' else rel_dir + '/'

        dirnames[:] = sorted(
            d for d in dirnames
            if not repo.is_internal(rel_dir + d)
            and not ignore_matcher.is_ignored(rel_dir + d, is_dir=True)
        )
        for name in filenames:
            rel_path = rel_dir + name
            if repo.is_internal(rel_path) or ignore_matcher.is_ignored(rel_path):
                continue
            if os.path.isfile(os.path.join(dirpath, name)):
                found.append(rel_path)

    return sorted(found, key=fs_encode)


def is_deleted(repo, path: str) -> bool:
    """True when a tracked path no longer names a regular file in the work tree."""
    return not (repo.work_tree / path).is_file()


def deleted_paths(repo, index) -> List[str]:
    """Index paths whose working file is gone."""
    return [entry.path for entry in index.entries() if is_deleted(repo, entry.path)]


def _working_change(repo, entry, force_hash: bool) -> Optional[FileStatus]:
    if is_deleted(repo, entry.path):
        return FileStatus.UNSTAGED_DELETED
    full_path = repo.work_tree / entry.path
    st = full_path.stat()

    if not force_hash and entry.matches_stat(st):
        return None

    logger.debug("Re-hashing %s", entry.path)
    if hash_file(full_path) != entry.sha1 or normalize_mode(st.st_mode) != entry.mode:
        return FileStatus.UNSTAGED_MODIFIED
    return None


def compute_status(repo, index=None, force_hash: bool = False, ignore_matcher=None) -> StatusReport:
    """
    Classify every path in HEAD, the index and the working directory.

    Args:
        repo: Repository instance
        index: Index to compare (loaded from disk when omitted)
        force_hash: Re-hash every tracked file instead of trusting stat
        ignore_matcher: IgnoreMatcher for untracked-file discovery

    Returns:
        StatusReport

    Raises:
        ObjectNotFound: If HEAD's commit or trees are missing
    """
    if index is None:
        index = repo.load_index()

    report = StatusReport(head_commit=repo.refs.resolve_head())
    head = head_files(repo)

    for entry in index.entries():
        head_entry = head.get(entry.path)
        if head_entry is None:
            report.add(entry.path, FileStatus.STAGED_NEW)
        elif head_entry != (entry.mode, entry.sha1):
            report.add(entry.path, FileStatus.STAGED_MODIFIED)

        change = _working_change(repo, entry, force_hash)
        if change is not None:
            report.add(entry.path, change)
        elif entry.path not in report.entries:
            report.add(entry.path, FileStatus.UNMODIFIED)

    for path in head:
        if path not in index:
            report.add(path, FileStatus.STAGED_DELETED)

    for path in working_files(repo, ignore_matcher):
        if path not in index:
            report.add(path, FileStatus.UNTRACKED)

    logger.debug("Status: %d paths, %d changed", len(report.entries), len(report.changed_paths()))
    return report
