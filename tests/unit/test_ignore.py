"""Tests for ignore pattern matching."""

from grove.utils.ignore import IgnorePattern, IgnoreMatcher, get_ignore_matcher


class TestIgnorePattern:
    """Tests for individual ignore patterns."""

    def test_simple_pattern(self):
        pattern = IgnorePattern("*.log")
        assert pattern.matches("test.log")
        assert pattern.matches("dir/test.log")
        assert not pattern.matches("test.txt")
        assert not pattern.matches("logfile")

    def test_directory_pattern(self):
        pattern = IgnorePattern("temp", directory_only=True)
        assert pattern.matches("temp/file.txt")
        assert pattern.matches("temp/sub/file.txt")
        assert pattern.matches("temp", is_dir=True)
        assert not pattern.matches("temp")

    def test_double_star_pattern(self):
        pattern = IgnorePattern("**/test.log")
        assert pattern.matches("test.log")
        assert pattern.matches("dir/test.log")
        assert pattern.matches("dir/sub/test.log")

    def test_anchored_pattern(self):
        pattern = IgnorePattern("/root.txt")
        assert pattern.matches("root.txt")
        assert not pattern.matches("sub/root.txt")

    def test_inner_slash_anchors(self):
        pattern = IgnorePattern("docs/*.md")
        assert pattern.matches("docs/a.md")
        assert not pattern.matches("x/docs/a.md")

    def test_question_mark_pattern(self):
        pattern = IgnorePattern("file?.txt")
        assert pattern.matches("file1.txt")
        assert not pattern.matches("file10.txt")

    def test_character_class(self):
        pattern = IgnorePattern("*.[oa]")
        assert pattern.matches("lib.a")
        assert pattern.matches("main.o")
        assert not pattern.matches("main.c")


class TestIgnoreMatcher:
    """Tests for ordered pattern sets."""

    def test_comments_and_blanks(self):
        matcher = IgnoreMatcher()
        matcher.add_pattern("# comment")
        matcher.add_pattern("")
        assert matcher.patterns == []

    def test_negation_last_match_wins(self):
        matcher = IgnoreMatcher()
        matcher.add_pattern("*.log")
        matcher.add_pattern("!keep.log")
        assert matcher.is_ignored("debug.log")
        assert not matcher.is_ignored("keep.log")

    def test_directory_only_from_line(self):
        matcher = IgnoreMatcher()
        matcher.add_pattern("build/")
        assert matcher.is_ignored("build", is_dir=True)
        assert matcher.is_ignored("build/out.o")
        assert not matcher.is_ignored("build")

    def test_load_file(self, tmp_path):
        ignore_file = tmp_path / '.groveignore'
        ignore_file.write_text("*.pyc\n# note\n__pycache__/\n")
        matcher = IgnoreMatcher()
        assert matcher.load_file(ignore_file) is True
        assert len(matcher.patterns) == 2
        assert matcher.load_file(tmp_path / 'missing') is False


def test_get_ignore_matcher(tmp_path):
    (tmp_path / '.groveignore').write_text("*.tmp\n")
    matcher = get_ignore_matcher(tmp_path)
    assert matcher.is_ignored("a.tmp")
    assert matcher.is_ignored(".grove", is_dir=True)
    assert matcher.is_ignored(".grove/objects/ab")
    assert not matcher.is_ignored("src/main.py")
