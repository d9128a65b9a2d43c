"""Repository management for Grove."""

import configparser
import logging
from pathlib import Path
from typing import Optional

from .errors import GuardFileMissing, NotARepository, RepositoryExists
from .index import Index
from .store import ObjectStore

logger = logging.getLogger(__name__)

CONTROL_DIR = '.grove'
GUARD_FILE = '.grove-allowed'
IGNORE_FILE = '.groveignore'
DEFAULT_BRANCH = 'main'


class Repository:
    """
    Represents a Grove repository.

    A repository value is the context every operation receives: it knows
    where the control directory lives and owns the object store and ref
    manager. The index is loaded and saved explicitly per command.
    """

    def __init__(self, path: str = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.grove_dir = self.work_tree / CONTROL_DIR
        self.objects_dir = self.grove_dir / 'objects'
        self.refs_dir = self.grove_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.grove_dir / 'HEAD'
        self.index_file = self.grove_dir / 'index'
        self.config_file = self.grove_dir / 'config'
        self.guard_file = self.work_tree / GUARD_FILE

        self.objects = ObjectStore(self.objects_dir)
        self._ref_manager = None

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the control directory and the guard file:
        .grove-allowed     # Guard file enabling destructive commands
        .grove/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/     # Branch references
        │   └── tags/      # Tag references
        ├── HEAD           # Current branch/commit
        └── config         # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryExists: If repository already exists
        """
        if self.grove_dir.exists():
            raise RepositoryExists(f"Repository already exists at {self.grove_dir}")

        self.work_tree.mkdir(parents=True, exist_ok=True)
        self.grove_dir.mkdir()
        self.objects_dir.mkdir()
        self.heads_dir.mkdir(parents=True)
        self.tags_dir.mkdir()

        self.head_file.write_text(f'ref: refs/heads/{DEFAULT_BRANCH}\n')

        config = configparser.ConfigParser()
        config['core'] = {
            'repositoryformatversion': '0',
            'bare': 'false',
            'filemode': 'true',
        }
        with open(self.config_file, 'w') as f:
            config.write(f)

        self.guard_file.touch()
        logger.info("Initialized empty repository in %s", self.grove_dir)
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / CONTROL_DIR).is_dir():
                return cls(str(current))

            # Reached filesystem root
            if current == current.parent:
                return None

            current = current.parent

    @classmethod
    def open(cls, path: str = '.') -> 'Repository':
        """Like find_repository, but raise NotARepository when none is found."""
        repo = cls.find_repository(path)
        if repo is None:
            raise NotARepository(f"Not a grove repository (or any parent): {Path(path).resolve()}")
        return repo

    def require_guard(self) -> None:
        """
        Check the advisory guard file before mutating the index or refs.

        Raises:
            GuardFileMissing: If the guard file is absent
        """
        if not self.guard_file.is_file():
            raise GuardFileMissing(self.guard_file)

    def load_index(self) -> Index:
        return Index.load(self.index_file)

    def save_index(self, index: Index) -> None:
        """Persist the index after checking the guard file."""
        self.require_guard()
        index.save(self.index_file)

    def relative_path(self, path) -> str:
        """
        Convert a filesystem path to a '/'-separated repository path.

        Raises:
            ValueError: If the path lies outside the work tree
        """
        path = Path(path)
        if not path.is_absolute():
            path = Path.cwd() / path
        # Resolve the parent only, so the file itself may be a symlink
        path = path.parent.resolve() / path.name
        return path.relative_to(self.work_tree).as_posix()

    def is_internal(self, rel_path: str) -> bool:
        """True for the control directory and the guard file."""
        first = rel_path.split('/', 1)[0]
        return first == CONTROL_DIR or rel_path == GUARD_FILE

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
