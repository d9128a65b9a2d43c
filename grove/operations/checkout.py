"""Materialize a commit's tree into an empty directory."""

import logging
from pathlib import Path
from typing import List

from grove.core.errors import MalformedObject, TargetNotEmpty
from grove.core.objects import MODE_EXECUTABLE, MODE_GITLINK, Blob
from grove.operations.tree import flatten, tree_of

logger = logging.getLogger(__name__)


def ensure_empty_target(target_dir: Path) -> None:
    """
    Check that target_dir is missing or an empty directory.

    Raises:
        TargetNotEmpty: If the directory has entries, or the path is a file
    """
    if target_dir.exists():
        if not target_dir.is_dir() or any(target_dir.iterdir()):
            raise TargetNotEmpty(target_dir)


def checkout(repo, commit_hash: str, target_dir) -> List[str]:
    """
    Write every file of a commit's tree under target_dir.

    The whole tree is flattened before the target is created, so a
    missing commit or tree object fails without touching the filesystem. A missing blob
    discovered mid-way aborts the checkout and leaves the target partially
    written; callers should treat it as undefined and clean it up.

    Args:
        repo: Repository instance
        commit_hash: Commit (or tag/tree) hash to check out
        target_dir: Empty or non-existent directory

    Returns:
        List of written paths, relative to target_dir

    Raises:
        TargetNotEmpty: If target_dir has content
        ObjectNotFound: If any referenced object is missing
    """
    target = Path(target_dir).resolve()
    ensure_empty_target(target)

    files = flatten(repo.objects, tree_of(repo.objects, commit_hash))
    target.mkdir(parents=True, exist_ok=True)

    written = []
    for path, (mode, blob_hash) in files.items():
        dest = target.joinpath(*path.split('/'))
        dest.parent.mkdir(parents=True, exist_ok=True)

        if mode == MODE_GITLINK:
            dest.mkdir(exist_ok=True)
            continue

        blob = repo.objects.read(blob_hash)
        if not isinstance(blob, Blob):
            raise MalformedObject(f"Expected blob for {path}, found {blob.kind}")
        dest.write_bytes(blob.data)
        dest.chmod(0o755 if mode == MODE_EXECUTABLE else 0o644)
        written.append(path)

    logger.info("Checked out %s into %s (%d files)", commit_hash[:7], target, len(written))
    return written
