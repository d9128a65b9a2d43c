"""Tree walking: flatten tree objects to path maps and build them back.

A flattened tree maps each '/'-separated file path to ``(mode, hash)``.
``build`` is the inverse of ``flatten``: building the flattening of a
tree yields the same tree hash, and unchanged subdirectories produce the
same subtree objects, which the store then deduplicates.
"""

import logging
from typing import Dict, List, Mapping, Tuple

from grove.core.errors import InvalidReference, MalformedObject, PathConflict
from grove.core.index import normalize_path
from grove.core.objects import MODE_TREE, Commit, Tag, Tree, fs_encode

logger = logging.getLogger(__name__)

FlatTree = Dict[str, Tuple[int, str]]


def read_tree(store, tree_hash: str) -> Tree:
    """Read an object that must be a tree."""
    obj = store.read(tree_hash)
    if not isinstance(obj, Tree):
        raise MalformedObject(f"Expected tree at {tree_hash}, found {obj.kind}")
    return obj


def tree_of(store, obj_hash: str) -> str:
    """
    Get the tree hash for a commit, tag or tree hash.

    Raises:
        InvalidReference: If the object has no associated tree
    """
    obj = store.read(obj_hash)
    while isinstance(obj, Tag):
        obj_hash = obj.object
        obj = store.read(obj_hash)
    if isinstance(obj, Commit):
        return obj.tree
    if isinstance(obj, Tree):
        return obj_hash
    raise InvalidReference(f"{obj_hash} is a {obj.kind}, not a tree or commit")


def _walk(store, tree_hash: str, prefix: str, out: FlatTree) -> None:
    for entry in read_tree(store, tree_hash).entries:
        path = f"{prefix}{entry.name}"
        if entry.mode == MODE_TREE:
            _walk(store, entry.hash, path + '/', out)
        else:
            out[path] = (entry.mode, entry.hash)


def flatten(store, tree_hash: str) -> FlatTree:
    """
    Recursively expand a tree into a path -> (mode, hash) mapping.

    Args:
        store: ObjectStore to read trees from
        tree_hash: Hash of the root tree

    Returns:
        dict ordered by raw path bytes

    Raises:
        ObjectNotFound: If the tree or any subtree is missing
        MalformedObject: If a tree entry points at a non-tree
    """
    out: FlatTree = {}
    _walk(store, tree_hash, '', out)
    return {path: out[path] for path in sorted(out, key=fs_encode)}


def _build_level(store, items: List[Tuple[List[str], int, str]], where: str) -> str:
    files: Dict[str, Tuple[int, str]] = {}
    subdirs: Dict[str, List[Tuple[List[str], int, str]]] = {}

    for parts, mode, obj_hash in items:
        name = parts[0]
        if len(parts) == 1:
            if name in files:
                raise PathConflict(f"Duplicate path: {where}{name}")
            files[name] = (mode, obj_hash)
        else:
            subdirs.setdefault(name, []).append((parts[1:], mode, obj_hash))

    tree = Tree()
    for name, children in subdirs.items():
        if name in files:
            raise PathConflict(f"'{where}{name}' is both a file and a directory")
        subtree_hash = _build_level(store, children, f"{where}{name}/")
        tree.add_entry(MODE_TREE, name, subtree_hash)

    for name, (mode, obj_hash) in files.items():
        tree.add_entry(mode, name, obj_hash)

    return store.write(tree)


def build(store, flat: Mapping[str, Tuple[int, str]]) -> str:
    """
    Build and store tree objects bottom-up from a flattened mapping.

    Args:
        store: ObjectStore to write trees into
        flat: path -> (mode, blob hash)

    Returns:
        str: Hash of the root tree

    Raises:
        PathConflict: If a path is invalid (empty segments, trailing '/',
            '.' or '..'), or a path is both a file and a directory
    """
    items = []
    for path, (mode, obj_hash) in flat.items():
        if normalize_path(path) != path:
            raise PathConflict(f"Path is not in normalized form: {path!r}")
        items.append((path.split('/'), mode, obj_hash))

    root_hash = _build_level(store, items, '')
    logger.debug("Built tree %s from %d paths", root_hash, len(items))
    return root_hash


def build_from_index(store, index) -> str:
    """Build the tree for the next commit from index entries."""
    return build(store, {entry.path: (entry.mode, entry.sha1) for entry in index.entries()})
