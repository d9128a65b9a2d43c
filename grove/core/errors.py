"""Exception types raised by the Grove core.

Every error derives from GroveError so callers (the CLI) can catch the
whole family in one place. The core never prints or exits.
"""


class GroveError(Exception):
    """Base class for all Grove errors."""


class NotARepository(GroveError):
    """No .grove directory was found."""


class RepositoryExists(GroveError):
    """init was run where a repository already exists."""


class ObjectNotFound(GroveError):
    """No object is stored under the requested hash."""

    def __init__(self, obj_hash: str):
        super().__init__(f"Object {obj_hash} not found")
        self.hash = obj_hash


class AmbiguousObject(GroveError):
    """An abbreviated hash matches more than one object."""

    def __init__(self, prefix: str, matches):
        super().__init__(f"Short hash {prefix} is ambiguous ({len(matches)} matches)")
        self.prefix = prefix
        self.matches = sorted(matches)


class MalformedObject(GroveError):
    """An object body cannot be parsed for its declared kind."""


class CorruptObject(GroveError):
    """A stored object failed decompression or its header/length/digest check."""


class CorruptIndex(GroveError):
    """The index file failed its integrity checks."""


class TargetNotEmpty(GroveError):
    """Checkout target directory already has content."""

    def __init__(self, target):
        super().__init__(f"Target directory is not empty: {target}")
        self.target = target


class GuardFileMissing(GroveError):
    """The advisory guard file is absent from the repository root."""

    def __init__(self, guard_path):
        super().__init__(
            f"Refusing to modify repository: guard file '{guard_path.name}' "
            f"is missing from {guard_path.parent}"
        )
        self.guard_path = guard_path


class PathConflict(GroveError):
    """Two index paths cannot coexist in one tree."""


class InvalidReference(GroveError):
    """A ref name is invalid or cannot be resolved."""


class NothingToCommit(GroveError):
    """The index matches HEAD."""
