"""Grove - a content-addressable object store and working-tree engine."""

__version__ = '0.1.0'

from grove.core.repository import Repository
from grove.core.objects import Blob, Tree, Commit, Tag

__all__ = [
    'Repository',
    'Blob',
    'Tree',
    'Commit',
    'Tag',
]
