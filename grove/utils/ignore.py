"""Ignore pattern matching for .groveignore files.

Patterns follow gitignore syntax: ``*``, ``?``, ``[...]``, ``**``,
a leading ``/`` anchors to the repository root, a trailing ``/`` matches
directories only, and a leading ``!`` re-includes a path. The last
matching pattern wins.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

IGNORE_FILENAME = '.groveignore'


def _translate(pattern: str) -> str:
    """Convert the glob part of a pattern to a regex fragment."""
    out = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if pattern.startswith('**/', i):
            out.append('(?:.*/)?')
            i += 3
        elif pattern.startswith('**', i):
            out.append('.*')
            i += 2
        elif c == '*':
            out.append('[^/]*')
            i += 1
        elif c == '?':
            out.append('[^/]')
            i += 1
        elif c == '[':
            close = pattern.find(']', i + 2)
            if close == -1:
                out.append(re.escape(c))
                i += 1
                continue
            body = pattern[i + 1:close]
            if body.startswith('!'):
                body = '^' + body[1:]
            out.append('[' + body.replace('\\', '\\\\') + ']')
            i = close + 1
        else:
            out.append(re.escape(c))
            i += 1
    return ''.join(out)


class IgnorePattern:
    """A single compiled ignore pattern."""

    def __init__(self, pattern: str, negation: bool = False, directory_only: bool = False):
        self.original = pattern
        self.negation = negation
        self.directory_only = directory_only

        anchored = pattern.startswith('/') or '/' in pattern.rstrip('/')
        body = _translate(pattern.lstrip('/'))
        prefix = '^' if anchored else '(?:^|/)'
        self._regex = re.compile(prefix + body + '$')

    def matches(self, path: str, is_dir: bool = False) -> bool:
        """
        Check a repository path against this pattern.

        A file also matches when one of its parent directories does, so
        'build/' ignores everything under build.
        """
        parts = path.split('/')
        for depth in range(1, len(parts) + 1):
            candidate = '/'.join(parts[:depth])
            candidate_is_dir = depth < len(parts) or is_dir
            if self.directory_only and not candidate_is_dir:
                continue
            if self._regex.search(candidate):
                return True
        return False

    def __repr__(self) -> str:
        flag = '!' if self.negation else ''
        return f"IgnorePattern({flag}{self.original}{'/' if self.directory_only else ''})"


class IgnoreMatcher:
    """Matches paths against an ordered list of ignore patterns."""

    def __init__(self):
        self.patterns: List[IgnorePattern] = []
        self._cache: Dict[Tuple[str, bool], bool] = {}

    def add_pattern(self, line: str) -> None:
        """Add one line of an ignore file; blanks and comments are skipped."""
        line = line.rstrip('\n').strip()
        if not line or line.startswith('#'):
            return

        negation = line.startswith('!')
        if negation:
            line = line[1:]
        directory_only = line.endswith('/')
        line = line.rstrip('/')
        if not line:
            return

        self.patterns.append(IgnorePattern(line, negation, directory_only))
        self._cache.clear()

    def load_file(self, path: Path) -> bool:
        """
        Load patterns from an ignore file.

        Returns:
            True if the file existed and was read
        """
        if not path.is_file():
            return False
        for line in path.read_text(errors='replace').splitlines():
            self.add_pattern(line)
        logger.debug("Loaded %d ignore patterns from %s", len(self.patterns), path)
        return True

    def is_ignored(self, path: str, is_dir: bool = False) -> bool:
        """
        Check if a repository path should be ignored.

        The last matching pattern wins, so negations can un-ignore a path.
        """
        path = path.replace('\\', '/')
        if path.startswith('./'):
            path = path[2:]

        key = (path, is_dir)
        if key not in self._cache:
            ignored = False
            for pattern in self.patterns:
                if pattern.matches(path, is_dir):
                    ignored = not pattern.negation
            self._cache[key] = ignored
        return self._cache[key]


def get_ignore_matcher(repo_root: Path) -> IgnoreMatcher:
    """
    Build the matcher for a repository: the control directory plus any
    patterns from the root .groveignore.
    """
    matcher = IgnoreMatcher()
    matcher.add_pattern('/.grove/')
    matcher.load_file(Path(repo_root) / IGNORE_FILENAME)
    return matcher
