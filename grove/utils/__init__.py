"""Utilities: ignore-file handling."""

from grove.utils.ignore import IgnoreMatcher, IgnorePattern, get_ignore_matcher

__all__ = [
    'IgnoreMatcher', 'IgnorePattern', 'get_ignore_matcher',
]
