"""Object codec for Grove.

The four object kinds (blob, tree, commit, tag) are plain dataclasses
tagged with a ``kind`` discriminant. ``encode`` and ``decode`` dispatch on
that tag through ``OBJECT_TYPES``; there is no shared base class.

Every object is stored and hashed as::

    <kind> <body length>\\0<body>
"""

import re
import time
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Tuple, Union

from .errors import CorruptObject, MalformedObject, PathConflict
from .hash import HASH_RAW_LENGTH, hash_object, is_hex_hash

MODE_FILE = 0o100644
MODE_EXECUTABLE = 0o100755
MODE_SYMLINK = 0o120000
MODE_TREE = 0o40000
MODE_GITLINK = 0o160000

VALID_MODES = frozenset({MODE_FILE, MODE_EXECUTABLE, MODE_SYMLINK, MODE_TREE, MODE_GITLINK})

_TIMEZONE_RE = re.compile(r'^[+-]\d{4}$')


def fs_encode(name: str) -> bytes:
    """Encode a path or entry name to the raw bytes stored on disk."""
    return name.encode('utf-8', 'surrogateescape')


def fs_decode(raw: bytes) -> str:
    """Inverse of fs_encode; arbitrary bytes survive the round trip."""
    return raw.decode('utf-8', 'surrogateescape')


def mode_type(mode: int) -> str:
    """Object kind an entry of the given mode points to."""
    if mode == MODE_TREE:
        return 'tree'
    if mode == MODE_GITLINK:
        return 'commit'
    return 'blob'


def tree_sort_key(name: str, mode: int) -> bytes:
    """
    Canonical ordering key for a tree entry.

    Entries sort by the raw bytes of their name, with directory names
    compared as if they carried a trailing '/'. This puts ``foo.txt``
    before the directory ``foo`` (since '.' < '/') but after a file
    named ``foo``.
    """
    key = fs_encode(name)
    if mode == MODE_TREE:
        key += b'/'
    return key


def validate_entry_name(name: str) -> None:
    """Reject names that cannot appear as a single tree entry."""
    if not name or name in ('.', '..'):
        raise PathConflict(f"Invalid tree entry name: {name!r}")
    if '/' in name or '\0' in name:
        raise PathConflict(f"Tree entry name may not contain '/' or NUL: {name!r}")


@dataclass
class Blob:
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """
    kind: ClassVar[str] = 'blob'

    data: bytes = b''

    def serialize(self) -> bytes:
        return self.data

    @classmethod
    def deserialize(cls, body: bytes) -> 'Blob':
        return cls(bytes(body))

    @classmethod
    def from_file(cls, filepath) -> 'Blob':
        """
        Create blob from file.

        Args:
            filepath: Path to file

        Returns:
            Blob: New blob containing file content
        """
        with open(filepath, 'rb') as f:
            return cls(f.read())

    @property
    def hash(self) -> str:
        return encode(self)[0]

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


@dataclass(frozen=True)
class TreeEntry:
    """
    A single entry in a tree.

    - mode: file mode as an integer (0o100644, 0o100755, 0o40000, ...)
    - name: entry name, a single path segment
    - hash: 40-character hex hash of the blob or subtree
    """
    mode: int
    name: str
    hash: str

    @property
    def type(self) -> str:
        return mode_type(self.mode)

    @property
    def sort_key(self) -> bytes:
        return tree_sort_key(self.name, self.mode)

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode:06o} {self.type} {self.hash[:7]} {self.name})"


@dataclass
class Tree:
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories). Entries are always kept in canonical order, so the
    encoded bytes never depend on the order they were added in.
    """
    kind: ClassVar[str] = 'tree'

    entries: List[TreeEntry] = field(default_factory=list)

    def add_entry(self, mode: int, name: str, obj_hash: str) -> TreeEntry:
        """
        Add entry to tree.

        Args:
            mode: File mode
            name: Entry name
            obj_hash: Object hash

        Returns:
            TreeEntry: The inserted entry

        Raises:
            PathConflict: If the name is invalid or already present
            MalformedObject: If the mode or hash is not valid
        """
        validate_entry_name(name)
        if mode not in VALID_MODES:
            raise MalformedObject(f"Invalid tree entry mode: {mode:o}")
        if not is_hex_hash(obj_hash):
            raise MalformedObject(f"Invalid object hash for {name!r}: {obj_hash!r}")
        if self.get(name) is not None:
            raise PathConflict(f"Duplicate tree entry name: {name!r}")

        entry = TreeEntry(mode, name, obj_hash)
        self.entries.append(entry)
        self.entries.sort(key=lambda e: e.sort_key)
        return entry

    def get(self, name: str) -> Optional[TreeEntry]:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def serialize(self) -> bytes:
        """
        Serialize tree to bytes.

        Format: <octal mode> <name>\\0<20-byte hash>, repeated, in
        canonical entry order.
        """
        parts = []
        for entry in sorted(self.entries, key=lambda e: e.sort_key):
            parts.append(b'%o %s\0' % (entry.mode, fs_encode(entry.name)))
            parts.append(bytes.fromhex(entry.hash))
        return b''.join(parts)

    @classmethod
    def deserialize(cls, body: bytes) -> 'Tree':
        """
        Parse a tree body.

        Input is treated as untrusted: entries must be complete, modes
        must be known octal values, and names must be strictly increasing
        in canonical order (which also rules out duplicates).

        Raises:
            MalformedObject: If any entry cannot be parsed
        """
        tree = cls()
        seen = set()
        previous_key = None
        pos = 0

        while pos < len(body):
            space_pos = body.find(b' ', pos)
            if space_pos == -1:
                raise MalformedObject(f"Truncated tree entry at offset {pos}")

            raw_mode = body[pos:space_pos]
            if not raw_mode or not all(0x30 <= c <= 0x37 for c in raw_mode):
                raise MalformedObject(f"Non-numeric tree entry mode: {raw_mode!r}")
            mode = int(raw_mode, 8)
            if mode not in VALID_MODES:
                raise MalformedObject(f"Unknown tree entry mode: {raw_mode.decode()}")

            null_pos = body.find(b'\0', space_pos + 1)
            if null_pos == -1:
                raise MalformedObject(f"Truncated tree entry name at offset {space_pos + 1}")
            name = fs_decode(body[space_pos + 1:null_pos])
            try:
                validate_entry_name(name)
            except PathConflict as e:
                raise MalformedObject(str(e)) from None

            digest = body[null_pos + 1:null_pos + 1 + HASH_RAW_LENGTH]
            if len(digest) != HASH_RAW_LENGTH:
                raise MalformedObject(f"Truncated hash for tree entry {name!r}")

            entry = TreeEntry(mode, name, digest.hex())
            if name in seen:
                raise MalformedObject(f"Duplicate tree entry name: {name!r}")
            if previous_key is not None and entry.sort_key <= previous_key:
                raise MalformedObject(f"Tree entries out of order at {name!r}")
            seen.add(name)
            previous_key = entry.sort_key
            tree.entries.append(entry)

            pos = null_pos + 1 + HASH_RAW_LENGTH

        return tree

    @property
    def hash(self) -> str:
        return encode(self)[0]

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


def _parse_signature(value: str, what: str) -> Tuple[str, int, str]:
    """Split 'Name <email> <timestamp> <tz>' into its parts."""
    parts = value.rsplit(' ', 2)
    if len(parts) != 3:
        raise MalformedObject(f"Malformed {what} line: {value!r}")
    ident, raw_time, timezone = parts
    if not raw_time.isdigit():
        raise MalformedObject(f"Non-numeric {what} timestamp: {raw_time!r}")
    if not _TIMEZONE_RE.match(timezone):
        raise MalformedObject(f"Malformed {what} timezone: {timezone!r}")
    return ident, int(raw_time), timezone


def _split_headers(body: bytes, kind: str) -> Tuple[List[Tuple[str, str]], str]:
    """
    Split a commit/tag body into ordered header pairs and the message.

    Continuation lines (starting with a space) are folded into the value
    of the preceding header, joined by newlines.
    """
    text = fs_decode(body)
    sep = text.find('\n\n')
    if sep == -1:
        raise MalformedObject(f"{kind} has no header/message separator")

    headers: List[Tuple[str, str]] = []
    for line in text[:sep].split('\n'):
        if line.startswith(' '):
            if not headers:
                raise MalformedObject(f"{kind} starts with a continuation line")
            key, value = headers[-1]
            headers[-1] = (key, value + '\n' + line[1:])
            continue
        key, space, value = line.partition(' ')
        if not space or not key:
            raise MalformedObject(f"Malformed {kind} header line: {line!r}")
        headers.append((key, value))

    return headers, text[sep + 2:]


def _format_header(key: str, value: str) -> str:
    return f"{key} " + value.replace('\n', '\n ')


def _ordered_headers(pairs: List[Tuple[str, str]],
                     order: Optional[List[str]]) -> List[Tuple[str, str]]:
    """
    Lay out header pairs in the order they were decoded in.

    Falls back to the given (canonical) order when there is no recorded
    order or the set of header keys has changed since decoding.
    """
    if order is None or sorted(order) != sorted(key for key, _ in pairs):
        return pairs
    queues: Dict[str, List[str]] = {}
    for key, value in pairs:
        queues.setdefault(key, []).append(value)
    return [(key, queues[key].pop(0)) for key in order]


def _single(headers: Dict[str, List[str]], key: str, kind: str) -> str:
    values = headers.get(key, [])
    if len(values) != 1:
        raise MalformedObject(f"{kind} must have exactly one '{key}' header, found {len(values)}")
    return values[0]


@dataclass
class Commit:
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history
    - Author and committer identity with timestamps
    - Commit message

    Headers this codec does not interpret (gpgsig, encoding, ...) are kept
    in ``extra_headers``, and the decoded header order is remembered, so
    foreign commits re-encode to the same bytes.
    """
    kind: ClassVar[str] = 'commit'

    tree: str = ''
    parents: List[str] = field(default_factory=list)
    author: str = ''
    author_time: int = 0
    author_timezone: str = '+0000'
    committer: str = ''
    committer_time: int = 0
    committer_timezone: str = '+0000'
    message: str = ''
    extra_headers: List[Tuple[str, str]] = field(default_factory=list)
    header_order: Optional[List[str]] = field(default=None, repr=False, compare=False)

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author Name <email> <timestamp> <timezone>
        committer Name <email> <timestamp> <timezone>

        <commit message>
        """
        pairs = [('tree', self.tree)]
        pairs.extend(('parent', parent) for parent in self.parents)
        pairs.append(('author', f'{self.author} {self.author_time} {self.author_timezone}'))
        pairs.append(('committer', f'{self.committer} {self.committer_time} {self.committer_timezone}'))
        pairs.extend(self.extra_headers)
        lines = [_format_header(k, v) for k, v in _ordered_headers(pairs, self.header_order)]
        return fs_encode('\n'.join(lines) + '\n\n' + self.message)

    @classmethod
    def deserialize(cls, body: bytes) -> 'Commit':
        headers, message = _split_headers(body, 'commit')
        grouped: Dict[str, List[str]] = {}
        extra = []
        for key, value in headers:
            if key in ('tree', 'parent', 'author', 'committer'):
                grouped.setdefault(key, []).append(value)
            else:
                extra.append((key, value))

        tree = _single(grouped, 'tree', 'commit')
        parents = grouped.get('parent', [])
        for obj_hash in [tree] + parents:
            if not is_hex_hash(obj_hash):
                raise MalformedObject(f"Invalid hash in commit: {obj_hash!r}")

        author, author_time, author_tz = _parse_signature(
            _single(grouped, 'author', 'commit'), 'author')
        committer, committer_time, committer_tz = _parse_signature(
            _single(grouped, 'committer', 'commit'), 'committer')

        return cls(
            tree=tree,
            parents=parents,
            author=author,
            author_time=author_time,
            author_timezone=author_tz,
            committer=committer,
            committer_time=committer_time,
            committer_timezone=committer_tz,
            message=message,
            extra_headers=extra,
            header_order=[key for key, _ in headers],
        )

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        committer: str,
        message: str,
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes
            author: Author name and email (e.g., "Name <email>")
            committer: Committer name and email
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)
            timezone: Timezone offset (e.g., "+0000", "-0500")

        Returns:
            Commit: New commit object
        """
        if timestamp is None:
            timestamp = int(time.time())

        return cls(
            tree=tree_hash,
            parents=list(parent_hashes),
            author=author,
            author_time=timestamp,
            author_timezone=timezone,
            committer=committer,
            committer_time=timestamp,
            committer_timezone=timezone,
            message=message,
        )

    @property
    def hash(self) -> str:
        return encode(self)[0]

    @property
    def summary(self) -> str:
        return self.message.split('\n')[0]

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{self.summary[:50]}')"


@dataclass
class Tag:
    """
    Represents an annotated tag.

    Format:
    object <hash>
    type <kind>
    tag <name>
    tagger Name <email> <timestamp> <timezone>

    <message>
    """
    kind: ClassVar[str] = 'tag'

    object: str = ''
    object_kind: str = 'commit'
    tag: str = ''
    tagger: str = ''
    tagger_time: int = 0
    tagger_timezone: str = '+0000'
    message: str = ''
    extra_headers: List[Tuple[str, str]] = field(default_factory=list)
    header_order: Optional[List[str]] = field(default=None, repr=False, compare=False)

    def serialize(self) -> bytes:
        pairs = [
            ('object', self.object),
            ('type', self.object_kind),
            ('tag', self.tag),
            ('tagger', f'{self.tagger} {self.tagger_time} {self.tagger_timezone}'),
        ]
        pairs.extend(self.extra_headers)
        lines = [_format_header(k, v) for k, v in _ordered_headers(pairs, self.header_order)]
        return fs_encode('\n'.join(lines) + '\n\n' + self.message)

    @classmethod
    def deserialize(cls, body: bytes) -> 'Tag':
        headers, message = _split_headers(body, 'tag')
        grouped: Dict[str, List[str]] = {}
        extra = []
        for key, value in headers:
            if key in ('object', 'type', 'tag', 'tagger'):
                grouped.setdefault(key, []).append(value)
            else:
                extra.append((key, value))

        target = _single(grouped, 'object', 'tag')
        if not is_hex_hash(target):
            raise MalformedObject(f"Invalid hash in tag: {target!r}")
        object_kind = _single(grouped, 'type', 'tag')
        if object_kind not in OBJECT_TYPES:
            raise MalformedObject(f"Unknown tagged object type: {object_kind!r}")
        tagger, tagger_time, tagger_tz = _parse_signature(
            _single(grouped, 'tagger', 'tag'), 'tagger')

        return cls(
            object=target,
            object_kind=object_kind,
            tag=_single(grouped, 'tag', 'tag'),
            tagger=tagger,
            tagger_time=tagger_time,
            tagger_timezone=tagger_tz,
            message=message,
            extra_headers=extra,
            header_order=[key for key, _ in headers],
        )

    @classmethod
    def create(
        cls,
        target_hash: str,
        target_kind: str,
        name: str,
        tagger: str,
        message: str,
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Tag':
        if timestamp is None:
            timestamp = int(time.time())
        return cls(
            object=target_hash,
            object_kind=target_kind,
            tag=name,
            tagger=tagger,
            tagger_time=timestamp,
            tagger_timezone=timezone,
            message=message,
        )

    @property
    def hash(self) -> str:
        return encode(self)[0]

    def __repr__(self) -> str:
        return f"Tag(name={self.tag}, object={self.object[:7]} {self.object_kind})"


GroveObject = Union[Blob, Tree, Commit, Tag]

OBJECT_TYPES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
    'tag': Tag,
}


def serialize(obj: GroveObject) -> bytes:
    """Canonical body of an object, without the header."""
    return obj.serialize()


def frame(kind: str, body: bytes) -> bytes:
    """Prefix a body with its '<kind> <len>\\0' header."""
    return b'%s %d\0' % (kind.encode(), len(body)) + body


def encode(obj: GroveObject) -> Tuple[str, bytes]:
    """
    Encode an object.

    Returns:
        (hash, data) where data is header + body and hash is its SHA-1
    """
    data = frame(obj.kind, obj.serialize())
    return hash_object(data), data


def decode(kind: str, body: bytes) -> GroveObject:
    """
    Decode an object body of the given kind.

    Raises:
        MalformedObject: If the kind is unknown or the body is invalid
    """
    obj_type = OBJECT_TYPES.get(kind)
    if obj_type is None:
        raise MalformedObject(f"Unknown object type: {kind!r}")
    return obj_type.deserialize(body)


def split_header(data: bytes) -> Tuple[str, bytes]:
    """
    Split stored object bytes into kind and body.

    Raises:
        CorruptObject: If the header is missing or the length disagrees
    """
    null_idx = data.find(b'\0')
    if null_idx == -1:
        raise CorruptObject("Object header is not terminated")

    header = data[:null_idx]
    body = data[null_idx + 1:]
    kind, space, raw_size = header.partition(b' ')
    if not space or not raw_size.isdigit():
        raise CorruptObject(f"Invalid object header: {header!r}")

    size = int(raw_size)
    if len(body) != size:
        raise CorruptObject(f"Object size mismatch: expected {size}, got {len(body)}")

    return kind.decode('ascii', 'replace'), body
