"""Core functionality for Grove.

This module contains the core data structures:
- Object codec (Blob, Tree, Commit, Tag)
- Loose object store
- Repository context
- Index/staging area
- Reference management
- Configuration management
- Hashing utilities

For tree walking, status, checkout and commit, see grove.operations
"""

from grove.core.objects import Blob, Tree, TreeEntry, Commit, Tag, encode, decode
from grove.core.store import ObjectStore
from grove.core.repository import Repository
from grove.core.hash import hash_object, hash_file
from grove.core.index import Index, IndexEntry
from grove.core.refs import RefManager
from grove.core.config import Config, get_config

__all__ = [
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Tag',
    'encode',
    'decode',
    'ObjectStore',
    'Repository',
    'Index',
    'IndexEntry',
    'RefManager',
    'Config',
    'get_config',
    'hash_object',
    'hash_file',
]
