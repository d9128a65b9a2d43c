"""Reference management for Grove."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import AmbiguousObject, InvalidReference, ObjectNotFound
from .hash import HASH_HEX_LENGTH, is_hex_hash
from .objects import Commit, Tag
from .store import atomic_write

logger = logging.getLogger(__name__)

SYMREF_PREFIX = 'ref: '
MAX_SYMREF_DEPTH = 10

_ANCESTRY_RE = re.compile(r'^(?P<base>.+?)(?P<suffix>(?:~\d*|\^)+)$')


def is_valid_ref_name(name: str) -> bool:
    """
    Check if a branch or tag name is valid.

    Args:
        name: Proposed name

    Returns:
        True if valid, False otherwise
    """
    if not name:
        return False

    # Cannot start or end with /, or contain empty components
    if name.startswith('/') or name.endswith('/') or '//' in name:
        return False

    if any(part.startswith('.') for part in name.split('/')):
        return False

    invalid_chars = ' ~^:?*[\\'
    if any(char in name for char in invalid_chars):
        return False
    if any(ord(char) < 0x20 or ord(char) == 0x7f for char in name):
        return False

    if name.startswith('-') or '..' in name or '@{' in name:
        return False

    if name.endswith('.lock') or name.endswith('.'):
        return False

    return True


class RefManager:
    """
    Manages references (branches, tags, HEAD).

    Handles:
    - Symbolic references (HEAD pointing to branch)
    - Direct references (detached HEAD)
    - Branch references (refs/heads/*)
    - Tag references (refs/tags/*)
    - Resolution of names, hashes and ancestry suffixes to objects
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.grove_dir = repo.grove_dir
        self.refs_dir = repo.refs_dir
        self.heads_dir = repo.heads_dir
        self.tags_dir = repo.tags_dir
        self.head_file = repo.head_file

    def _ref_path(self, ref_name: str) -> Path:
        path = (self.grove_dir / ref_name).resolve()
        if ref_name != 'HEAD' and not str(path).startswith(str(self.refs_dir.resolve())):
            raise InvalidReference(f"Reference outside refs/: {ref_name}")
        return path

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return the hash it points to.

        Symbolic references are followed.

        Args:
            ref_name: Full reference name ('HEAD', 'refs/heads/main', ...)

        Returns:
            Object hash or None if the reference (or its target) doesn't exist
        """
        for _ in range(MAX_SYMREF_DEPTH):
            ref_path = self._ref_path(ref_name)
            if not ref_path.is_file():
                return None

            content = ref_path.read_text().strip()
            if not content.startswith(SYMREF_PREFIX):
                return content or None
            ref_name = content[len(SYMREF_PREFIX):].strip()

        raise InvalidReference(f"Symbolic reference loop at {ref_name}")

    def write_ref(self, ref_name: str, obj_hash: str) -> None:
        """
        Point a reference at an object.

        Raises:
            GuardFileMissing: If the guard file is absent
            ObjectNotFound: If the object does not exist
        """
        self.repo.require_guard()
        if not self.repo.objects.exists(obj_hash):
            raise ObjectNotFound(obj_hash)

        ref_path = self._ref_path(ref_name)
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(ref_path, (obj_hash + '\n').encode())
        logger.debug("Updated %s to %s", ref_name, obj_hash)

    def delete_ref(self, ref_name: str) -> bool:
        """
        Delete a reference.

        Returns:
            True if deleted, False if not found
        """
        self.repo.require_guard()
        ref_path = self._ref_path(ref_name)
        if ref_path.is_file():
            ref_path.unlink()
            return True
        return False

    def head_target(self) -> Optional[str]:
        """The ref HEAD points to, or None when HEAD is detached."""
        if not self.head_file.exists():
            return None
        content = self.head_file.read_text().strip()
        if content.startswith(SYMREF_PREFIX):
            return content[len(SYMREF_PREFIX):].strip()
        return None

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            Commit hash or None if no commit has been made yet
        """
        return self.read_ref('HEAD')

    def get_current_branch(self) -> Optional[str]:
        """
        Get the current branch name.

        Returns:
            Branch name or None if in detached HEAD state
        """
        target = self.head_target()
        if target and target.startswith('refs/heads/'):
            return target[len('refs/heads/'):]
        return None

    def is_detached_head(self) -> bool:
        """True when HEAD holds a hash rather than a branch reference."""
        return self.head_file.exists() and self.head_target() is None

    def update_head(self, commit_hash: str) -> None:
        """Advance the current branch, or HEAD itself when detached."""
        target = self.head_target()
        if target:
            self.write_ref(target, commit_hash)
        else:
            self.repo.require_guard()
            atomic_write(self.head_file, (commit_hash + '\n').encode())

    def list_refs(self, prefix: str = 'refs/') -> List[Tuple[str, str]]:
        """
        List references under a prefix.

        Returns:
            Sorted list of (ref_name, hash) tuples
        """
        base = self.grove_dir / prefix
        if not base.is_dir():
            return []

        refs = []
        for ref_file in base.rglob('*'):
            if not ref_file.is_file() or ref_file.name.startswith('.tmp-'):
                continue
            ref_name = ref_file.relative_to(self.grove_dir).as_posix()
            obj_hash = self.read_ref(ref_name)
            if obj_hash:
                refs.append((ref_name, obj_hash))
        return sorted(refs)

    def list_branches(self) -> List[Tuple[str, str]]:
        """List (branch_name, commit_hash) tuples."""
        return [(name[len('refs/heads/'):], h) for name, h in self.list_refs('refs/heads/')]

    def list_tags(self) -> List[Tuple[str, str]]:
        """List (tag_name, hash) tuples; annotated tags give the tag object hash."""
        return [(name[len('refs/tags/'):], h) for name, h in self.list_refs('refs/tags/')]

    def peel(self, obj_hash: str) -> str:
        """Follow annotated tags until a non-tag object is reached."""
        for _ in range(MAX_SYMREF_DEPTH):
            obj = self.repo.objects.read(obj_hash)
            if not isinstance(obj, Tag):
                return obj_hash
            obj_hash = obj.object
        raise InvalidReference(f"Tag chain too deep at {obj_hash}")

    def _resolve_name(self, ref: str) -> Optional[str]:
        if ref == 'HEAD':
            return self.resolve_head()

        if len(ref) == HASH_HEX_LENGTH and is_hex_hash(ref) and self.repo.objects.exists(ref):
            return ref

        for candidate in (ref, f'refs/{ref}', f'refs/tags/{ref}', f'refs/heads/{ref}'):
            if not candidate.startswith('refs/'):
                continue
            try:
                obj_hash = self.read_ref(candidate)
            except InvalidReference:
                continue
            if obj_hash:
                return obj_hash

        if is_hex_hash(ref.lower(), min_length=4):
            try:
                return self.repo.objects.resolve_prefix(ref)
            except ObjectNotFound:
                return None
            except AmbiguousObject as e:
                raise InvalidReference(str(e)) from e

        return None

    def resolve_reference(self, ref: str) -> str:
        """
        Resolve a revision string to an object hash.

        Accepts 'HEAD', full or abbreviated hashes, branch and tag names,
        full ref paths, and '~N' / '^' first-parent suffixes.

        Raises:
            InvalidReference: If the revision cannot be resolved
        """
        match = _ANCESTRY_RE.match(ref)
        if match:
            obj_hash = self.resolve_commit(match.group('base'))
            for step in re.findall(r'~\d*|\^', match.group('suffix')):
                count = 1 if step in ('~', '^') else int(step[1:])
                for _ in range(count):
                    commit = self.repo.objects.read(obj_hash)
                    if not commit.parents:
                        raise InvalidReference(f"Revision {ref} goes past the root commit")
                    obj_hash = commit.parents[0]
            return obj_hash

        obj_hash = self._resolve_name(ref)
        if obj_hash is None:
            raise InvalidReference(f"Unknown revision: {ref}")
        return obj_hash

    def resolve_commit(self, ref: str) -> str:
        """
        Resolve a revision to a commit hash, peeling annotated tags.

        Raises:
            InvalidReference: If the revision does not name a commit
        """
        obj_hash = self.peel(self.resolve_reference(ref))
        if not isinstance(self.repo.objects.read(obj_hash), Commit):
            raise InvalidReference(f"Not a commit: {ref}")
        return obj_hash
