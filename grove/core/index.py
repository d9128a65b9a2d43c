"""Index (staging area) implementation."""

import hashlib
import logging
import os
import stat as stat_module
import struct
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional

from .errors import CorruptIndex, PathConflict
from .hash import HASH_RAW_LENGTH, is_hex_hash
from .objects import MODE_EXECUTABLE, MODE_FILE, Blob, fs_decode, fs_encode
from .store import atomic_write

logger = logging.getLogger(__name__)

SIGNATURE = b'DIRC'
VERSION = 2
HEADER_FORMAT = '>4sII'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
ENTRY_FORMAT = '>IIIIIIIIII20sH'
ENTRY_FIXED_SIZE = struct.calcsize(ENTRY_FORMAT)  # 62
NAME_MASK = 0xFFF
UINT32 = 0xFFFFFFFF


def normalize_mode(st_mode: int) -> int:
    """Collapse a filesystem mode to the two file modes the index records."""
    if st_mode & stat_module.S_IXUSR:
        return MODE_EXECUTABLE
    return MODE_FILE


def normalize_path(path: str) -> str:
    """
    Validate and normalize a repository-relative path.

    Raises:
        PathConflict: If the path is empty, absolute or escapes the tree
    """
    path = str(path).replace('\\', '/')
    if not path or path.startswith('/'):
        raise PathConflict(f"Invalid index path: {path!r}")
    parts = path.split('/')
    if any(part in ('', '.', '..') for part in parts) or '\0' in path:
        raise PathConflict(f"Invalid index path: {path!r}")
    return path


def _padding(path_len: int) -> int:
    """NUL bytes after the path so the entry ends on an 8-byte boundary (1-8)."""
    entry_len = ENTRY_FIXED_SIZE + path_len
    return 8 - (entry_len % 8)


@dataclass
class IndexEntry:
    """
    Represents a single entry in the index.

    Stores metadata about a staged file including timestamps,
    permissions, and the hash of its content. Numeric fields are kept as
    unsigned 32-bit values, the width the on-disk format holds.
    """
    ctime: int          # Change time (seconds)
    ctime_ns: int       # Change time (nanoseconds)
    mtime: int          # Modification time (seconds)
    mtime_ns: int       # Modification time (nanoseconds)
    dev: int            # Device ID
    ino: int            # Inode number
    mode: int           # Normalized file mode
    uid: int            # User ID
    gid: int            # Group ID
    size: int           # File size
    sha1: str           # SHA-1 hash of content
    flags: int          # Flags (includes name length)
    path: str           # File path

    @classmethod
    def from_stat(cls, path: str, sha1: str, mode: int, st: Optional[os.stat_result]) -> 'IndexEntry':
        """Build an entry from an os.stat() result (None gives zeroed metadata)."""
        flags = min(len(fs_encode(path)), NAME_MASK)
        if st is None:
            return cls(0, 0, 0, 0, 0, 0, mode, 0, 0, 0, sha1, flags, path)

        return cls(
            ctime=(st.st_ctime_ns // 10**9) & UINT32,
            ctime_ns=st.st_ctime_ns % 10**9,
            mtime=(st.st_mtime_ns // 10**9) & UINT32,
            mtime_ns=st.st_mtime_ns % 10**9,
            dev=st.st_dev & UINT32,
            ino=st.st_ino & UINT32,
            mode=mode,
            uid=st.st_uid & UINT32,
            gid=st.st_gid & UINT32,
            size=st.st_size & UINT32,
            sha1=sha1,
            flags=flags,
            path=path,
        )

    def matches_stat(self, st: os.stat_result) -> bool:
        """
        Cheap change check against a fresh stat of the working file.

        A match is taken as proof the content is unchanged. Edits that
        preserve size and restore mtime slip through; callers that need
        certainty must re-hash.
        """
        return (
            self.mtime == (st.st_mtime_ns // 10**9) & UINT32
            and self.mtime_ns == st.st_mtime_ns % 10**9
            and self.size == st.st_size & UINT32
            and self.ino == st.st_ino & UINT32
            and self.mode == normalize_mode(st.st_mode)
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"IndexEntry({self.mode:o} {self.sha1[:7]} {self.path})"


class Index:
    """
    Grove index (staging area) implementation.

    The index stores the set of files to be included in the next commit.
    Each entry contains file metadata and the hash of the file content.
    Entries are keyed by path and always serialized in raw-byte path order.
    """

    def __init__(self):
        """Initialize empty index."""
        self._entries: Dict[str, IndexEntry] = {}
        self.version: int = VERSION

    def upsert(self, path: str, sha1: str, mode: int, stat_info: Optional[os.stat_result] = None) -> IndexEntry:
        """
        Insert or replace the entry for path.

        Args:
            path: Repository-relative path
            sha1: Blob hash of the content
            mode: Normalized file mode
            stat_info: os.stat() of the working file, if any

        Returns:
            IndexEntry: The stored entry
        """
        path = normalize_path(path)
        if not is_hex_hash(sha1):
            raise ValueError(f"Invalid blob hash: {sha1!r}")
        entry = IndexEntry.from_stat(path, sha1, mode, stat_info)
        self._entries[path] = entry
        return entry

    def add_entry(
        self,
        path: str,
        sha1: str,
        mode: int,
        size: int,
        mtime: int = 0,
        mtime_ns: int = 0,
        ctime: int = 0,
        ctime_ns: int = 0,
        dev: int = 0,
        ino: int = 0,
        uid: int = 0,
        gid: int = 0
    ) -> IndexEntry:
        """
        Add or update an entry from explicit field values.

        Args:
            path: File path relative to repository root
            sha1: SHA-1 hash of file content
            mode: File mode
            size: File size in bytes
            mtime: Modification time (seconds)
            mtime_ns: Modification time (nanoseconds)
            ctime: Change time (seconds)
            ctime_ns: Change time (nanoseconds)
            dev: Device ID
            ino: Inode number
            uid: User ID
            gid: Group ID
        """
        entry = self.upsert(path, sha1, mode)
        entry.size = size & UINT32
        entry.mtime, entry.mtime_ns = mtime & UINT32, mtime_ns
        entry.ctime, entry.ctime_ns = ctime & UINT32, ctime_ns
        entry.dev, entry.ino = dev & UINT32, ino & UINT32
        entry.uid, entry.gid = uid & UINT32, gid & UINT32
        return entry

    def add_file(self, repo, filepath) -> str:
        """
        Stage a file for commit.

        The blob is written only when the object store does not already
        hold it. The index itself is not saved; call save() once the
        command is done.

        Args:
            repo: Repository instance
            filepath: Path to file (absolute or relative to the work tree)

        Returns:
            str: SHA-1 hash of staged content
        """
        file_path = Path(filepath)
        if not file_path.is_absolute():
            file_path = repo.work_tree / file_path

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not file_path.is_file():
            raise IsADirectoryError(f"Not a file: {filepath}")

        rel_path = repo.relative_path(file_path)
        st = file_path.stat()
        blob = Blob.from_file(file_path)
        sha1 = blob.hash
        if repo.objects.exists(sha1):
            logger.debug("Blob for %s already stored", rel_path)
        else:
            repo.objects.write(blob)

        self.upsert(rel_path, sha1, normalize_mode(st.st_mode), st)
        return sha1

    def remove(self, path: str) -> bool:
        """
        Remove entry from index.

        Returns:
            True if an entry was removed, False if the path was not staged
        """
        return self._entries.pop(str(path).replace('\\', '/'), None) is not None

    def get_entry(self, path: str) -> Optional[IndexEntry]:
        """Get entry by path."""
        return self._entries.get(path)

    def entries(self) -> List[IndexEntry]:
        """All entries, sorted by raw path bytes."""
        return [self._entries[p] for p in sorted(self._entries, key=fs_encode)]

    def paths(self) -> List[str]:
        return [entry.path for entry in self.entries()]

    def clear(self) -> None:
        """Clear all entries from index."""
        self._entries.clear()

    def serialize(self) -> bytes:
        """
        Encode the index in its binary format.

        Format:
        - Header: 'DIRC' + version (4 bytes) + entry count (4 bytes)
        - Entries: sorted by path, each 62 fixed bytes + path + NUL padding
        - Checksum: SHA-1 of everything before it
        """
        content = bytearray(struct.pack(HEADER_FORMAT, SIGNATURE, self.version, len(self._entries)))

        for entry in self.entries():
            raw_path = fs_encode(entry.path)
            content.extend(struct.pack(
                ENTRY_FORMAT,
                entry.ctime,
                entry.ctime_ns,
                entry.mtime,
                entry.mtime_ns,
                entry.dev,
                entry.ino,
                entry.mode,
                entry.uid,
                entry.gid,
                entry.size,
                bytes.fromhex(entry.sha1),
                entry.flags,
            ))
            content.extend(raw_path)
            content.extend(b'\0' * _padding(len(raw_path)))

        content.extend(hashlib.sha1(content).digest())
        return bytes(content)

    def save(self, index_path) -> None:
        """Write the index, atomically replacing any previous file."""
        atomic_write(Path(index_path), self.serialize())
        logger.debug("Saved index with %d entries to %s", len(self), index_path)

    @classmethod
    def parse(cls, data: bytes) -> 'Index':
        """
        Decode index bytes.

        Raises:
            CorruptIndex: On any checksum, header or entry-table damage
        """
        if len(data) < HEADER_SIZE + HASH_RAW_LENGTH:
            raise CorruptIndex(f"Index file too short ({len(data)} bytes)")

        content = data[:-HASH_RAW_LENGTH]
        checksum = data[-HASH_RAW_LENGTH:]
        if hashlib.sha1(content).digest() != checksum:
            raise CorruptIndex("Index checksum mismatch")

        signature, version, entry_count = struct.unpack_from(HEADER_FORMAT, content, 0)
        if signature != SIGNATURE:
            raise CorruptIndex(f"Invalid index signature: {signature!r}")
        if version != VERSION:
            raise CorruptIndex(f"Unsupported index version: {version}")

        index = cls()
        offset = HEADER_SIZE
        previous = None

        for _ in range(entry_count):
            if offset + ENTRY_FIXED_SIZE > len(content):
                raise CorruptIndex(f"Index truncated: expected {entry_count} entries")
            fields = struct.unpack_from(ENTRY_FORMAT, content, offset)
            offset += ENTRY_FIXED_SIZE

            path_end = content.find(b'\0', offset)
            if path_end == -1:
                raise CorruptIndex("Unterminated path in index entry")
            raw_path = content[offset:path_end]
            flags = fields[11]
            if (flags & NAME_MASK) != min(len(raw_path), NAME_MASK):
                raise CorruptIndex(f"Path length mismatch for index entry {raw_path!r}")

            offset += len(raw_path) + _padding(len(raw_path))
            if offset > len(content) or any(content[path_end:offset]):
                raise CorruptIndex(f"Bad padding after index entry {raw_path!r}")

            if previous is not None and raw_path <= previous:
                raise CorruptIndex(f"Index entries out of order at {raw_path!r}")
            previous = raw_path

            path = fs_decode(raw_path)
            index._entries[path] = IndexEntry(
                ctime=fields[0],
                ctime_ns=fields[1],
                mtime=fields[2],
                mtime_ns=fields[3],
                dev=fields[4],
                ino=fields[5],
                mode=fields[6],
                uid=fields[7],
                gid=fields[8],
                size=fields[9],
                sha1=fields[10].hex(),
                flags=flags,
                path=path,
            )

        # Skip extension blocks written by other tools: 4-byte tag + u32 size
        while offset < len(content):
            if offset + 8 > len(content):
                raise CorruptIndex("Trailing garbage after index entries")
            ext_size = struct.unpack_from('>I', content, offset + 4)[0]
            offset += 8 + ext_size
            if offset > len(content):
                raise CorruptIndex("Index extension overruns file")

        return index

    @classmethod
    def load(cls, index_path) -> 'Index':
        """
        Read the index from disk.

        A missing file is an empty index, so a fresh repository can run
        status and add straight away.
        """
        path = Path(index_path)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return cls()

        index = cls.parse(data)
        logger.debug("Loaded index with %d entries from %s", len(index), path)
        return index

    def __contains__(self, path) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        """Number of entries in index."""
        return len(self._entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"Index(entries={len(self._entries)})"
