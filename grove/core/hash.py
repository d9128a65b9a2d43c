"""Hash utilities for Grove."""

import hashlib

HASH_HEX_LENGTH = 40
HASH_RAW_LENGTH = 20


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def hash_file(filepath: str) -> str:
    """
    Compute the object hash a file would get when stored as a blob.
    
    The blob header is included, so the result matches what
    `grove hash-object` prints and what the index records.
    
    Args:
        filepath: Path to file
        
    Returns:
        40-character hex string
    """
    with open(filepath, 'rb') as f:
        data = f.read()
    return hash_object(b'blob %d\0' % len(data) + data)


def is_hex_hash(value: str, min_length: int = HASH_HEX_LENGTH) -> bool:
    """Check whether value looks like a (possibly abbreviated) hex hash."""
    if not isinstance(value, str):
        return False
    if not min_length <= len(value) <= HASH_HEX_LENGTH:
        return False
    return all(c in '0123456789abcdef' for c in value)
