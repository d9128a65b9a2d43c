"""Loose object storage.

Objects live under ``objects/<first 2 hex>/<remaining 38 hex>`` as the
zlib-compressed bytes of ``<kind> <len>\\0<body>``.
"""

import logging
import os
import tempfile
import zlib
from pathlib import Path
from typing import Tuple

from .errors import AmbiguousObject, CorruptObject, ObjectNotFound
from .hash import HASH_HEX_LENGTH, hash_object, is_hex_hash
from .objects import GroveObject, decode, encode, frame, split_header

logger = logging.getLogger(__name__)

MIN_PREFIX_LENGTH = 4


def atomic_write(path: Path, data: bytes, mode: int = 0o644) -> None:
    """
    Write data to path so that readers see either the old file or the
    complete new one.

    The bytes go to a temporary file in the same directory, which is then
    renamed over the destination.
    """
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix='.tmp-')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class ObjectStore:
    """
    Content-addressed object database.

    Writes are idempotent: an object whose hash already exists on disk is
    never rewritten, since identical hashes imply identical content.
    """

    def __init__(self, objects_dir):
        self.objects_dir = Path(objects_dir)

    def path_for(self, obj_hash: str) -> Path:
        """
        Get filesystem path for an object.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            Path: objects/ab/cdef... for hash abcdef...
        """
        return self.objects_dir / obj_hash[:2] / obj_hash[2:]

    def exists(self, obj_hash: str) -> bool:
        """Check for an object without reading or decompressing it."""
        if not is_hex_hash(obj_hash):
            return False
        return self.path_for(obj_hash).is_file()

    def write(self, obj: GroveObject) -> str:
        """
        Store an object.

        Args:
            obj: Object to write

        Returns:
            str: SHA-1 hash of the object
        """
        obj_hash, data = encode(obj)
        self._store(obj_hash, data)
        return obj_hash

    def write_raw(self, kind: str, body: bytes) -> str:
        """Store an already-serialized body under the given kind."""
        data = frame(kind, body)
        obj_hash = hash_object(data)
        self._store(obj_hash, data)
        return obj_hash

    def _store(self, obj_hash: str, data: bytes) -> None:
        path = self.path_for(obj_hash)
        if path.exists():
            logger.debug("Object %s already stored", obj_hash)
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(path, zlib.compress(data), mode=0o444)
        logger.debug("Wrote object %s (%d bytes)", obj_hash, len(data))

    def read_raw(self, obj_hash: str) -> Tuple[str, bytes]:
        """
        Read an object's kind and body without decoding the body.

        Raises:
            ObjectNotFound: If no object is stored under the hash
            CorruptObject: If decompression, header, length or digest checks fail
        """
        if not is_hex_hash(obj_hash):
            raise ObjectNotFound(obj_hash)

        path = self.path_for(obj_hash)
        try:
            compressed = path.read_bytes()
        except FileNotFoundError:
            raise ObjectNotFound(obj_hash) from None

        try:
            data = zlib.decompress(compressed)
        except zlib.error as e:
            raise CorruptObject(f"Object {obj_hash} failed to decompress: {e}") from e

        if hash_object(data) != obj_hash:
            raise CorruptObject(f"Object {obj_hash} content does not match its hash")

        try:
            return split_header(data)
        except CorruptObject as e:
            raise CorruptObject(f"Object {obj_hash}: {e}") from e

    def read(self, obj_hash: str) -> GroveObject:
        """
        Read and decode an object.

        Raises:
            ObjectNotFound: If no object is stored under the hash
            CorruptObject: If the stored bytes are damaged
            MalformedObject: If the body cannot be parsed for its kind
        """
        kind, body = self.read_raw(obj_hash)
        return decode(kind, body)

    def resolve_prefix(self, prefix: str) -> str:
        """
        Expand an abbreviated hash to the full hash of a stored object.

        Raises:
            ObjectNotFound: If nothing matches (or prefix is too short)
            AmbiguousObject: If several objects match
        """
        prefix = prefix.lower()
        if not is_hex_hash(prefix, min_length=MIN_PREFIX_LENGTH):
            raise ObjectNotFound(prefix)
        if len(prefix) == HASH_HEX_LENGTH:
            if not self.exists(prefix):
                raise ObjectNotFound(prefix)
            return prefix

        subdir = self.objects_dir / prefix[:2]
        matches = []
        if subdir.is_dir():
            for obj_file in subdir.iterdir():
                full_hash = prefix[:2] + obj_file.name
                if len(full_hash) == HASH_HEX_LENGTH and full_hash.startswith(prefix):
                    matches.append(full_hash)

        if not matches:
            raise ObjectNotFound(prefix)
        if len(matches) > 1:
            raise AmbiguousObject(prefix, matches)
        return matches[0]

    def __repr__(self) -> str:
        return f"ObjectStore(path={self.objects_dir})"
