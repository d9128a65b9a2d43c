"""Create commits from the index and walk commit history."""

import logging
import time
from typing import Iterator, Optional, Tuple

from grove.core.config import get_config
from grove.core.errors import MalformedObject, NothingToCommit
from grove.core.objects import Commit
from grove.operations.status import deleted_paths
from grove.operations.tree import build_from_index

logger = logging.getLogger(__name__)


def local_timezone(timestamp: Optional[int] = None) -> str:
    """UTC offset of the local zone at timestamp, formatted as '+HHMM'."""
    offset = time.localtime(timestamp).tm_gmtoff
    sign = '-' if offset < 0 else '+'
    minutes = abs(offset) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def commit(
    repo,
    message: str,
    author: Optional[str] = None,
    timestamp: Optional[int] = None,
    timezone: Optional[str] = None,
    index=None,
) -> str:
    """
    Record the index as a new commit on the current branch.

    Tracked files missing from the work tree are removed from the index
    first, so a deletion is recorded without an explicit rm. The tree is
    built bottom-up from the remaining entries; unchanged subdirectories
    reuse their existing tree objects.

    Args:
        repo: Repository instance
        message: Commit message
        author: 'Name <email>' (defaults to the configured identity)
        timestamp: Unix time (defaults to now)
        timezone: '+HHMM' offset (defaults to the local zone)
        index: Index to commit (loaded from disk when omitted)

    Returns:
        str: Hash of the new commit

    Raises:
        GuardFileMissing: If the guard file is absent
        NothingToCommit: If the index matches HEAD
        PathConflict: If index paths cannot form a tree
    """
    repo.require_guard()
    if index is None:
        index = repo.load_index()

    deleted = deleted_paths(repo, index)
    if deleted:
        for path in deleted:
            index.remove(path)
        repo.save_index(index)
        logger.info("Dropped %d deleted file(s) from the index", len(deleted))

    parent = repo.refs.resolve_head()
    tree_hash = build_from_index(repo.objects, index)

    if parent is None:
        if len(index) == 0:
            raise NothingToCommit("Nothing to commit (the index is empty)")
    else:
        parent_commit = repo.objects.read(parent)
        if not isinstance(parent_commit, Commit):
            raise MalformedObject(f"HEAD points at a {parent_commit.kind}, not a commit")
        if parent_commit.tree == tree_hash:
            raise NothingToCommit("Nothing to commit, index matches HEAD")

    if author is None:
        author = get_config(repo).get_signature()
    if timestamp is None:
        timestamp = int(time.time())
    if timezone is None:
        timezone = local_timezone(timestamp)

    new_commit = Commit.create(
        tree_hash=tree_hash,
        parent_hashes=[parent] if parent else [],
        author=author,
        committer=author,
        message=message if message.endswith('\n') else message + '\n',
        timestamp=timestamp,
        timezone=timezone,
    )
    commit_hash = repo.objects.write(new_commit)
    repo.refs.update_head(commit_hash)

    logger.info("Committed %s (tree %s)", commit_hash[:7], tree_hash[:7])
    return commit_hash


def iter_history(repo, start: str) -> Iterator[Tuple[str, Commit]]:
    """
    Walk first parents from start back to the root commit.

    Yields:
        (commit_hash, Commit) pairs, newest first
    """
    commit_hash = repo.refs.resolve_commit(start)
    while commit_hash:
        obj = repo.objects.read(commit_hash)
        if not isinstance(obj, Commit):
            raise MalformedObject(f"Expected commit at {commit_hash}, found {obj.kind}")
        yield commit_hash, obj
        commit_hash = obj.parents[0] if obj.parents else None
