"""Operations built on the core: tree walking, status, checkout, commit, tag."""

from grove.operations.tree import flatten, build, build_from_index, tree_of
from grove.operations.status import FileStatus, StatusReport, compute_status
from grove.operations.checkout import checkout
from grove.operations.commit import commit, iter_history
from grove.operations.tag import create_tag

__all__ = [
    'flatten', 'build', 'build_from_index', 'tree_of',
    'FileStatus', 'StatusReport', 'compute_status',
    'checkout',
    'commit', 'iter_history',
    'create_tag',
]
