"""Integration tests for the status command."""

from pathlib import Path
from click.testing import CliRunner

from grove.cli.main import cli


def test_status_sections(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('tracked.txt').write_text('v1')
        Path('gone.txt').write_text('bye')
        runner.invoke(cli, ['add', 'tracked.txt', 'gone.txt'])
        runner.invoke(cli, ['commit', '-m', 'Initial'])

        Path('tracked.txt').write_text('version two')
        Path('gone.txt').unlink()
        Path('staged.txt').write_text('new')
        runner.invoke(cli, ['add', 'staged.txt'])
        Path('loose.txt').write_text('?')

        result = runner.invoke(cli, ['status'])
        assert result.exit_code == 0
        assert "On branch main" in result.output
        assert "Changes to be committed:" in result.output
        assert "new file:   staged.txt" in result.output
        assert "Changes not staged for commit:" in result.output
        assert "modified:   tracked.txt" in result.output
        assert "deleted:    gone.txt" in result.output
        assert "Untracked files:" in result.output
        assert "loose.txt" in result.output


def test_status_clean(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('a.txt').write_text('a')
        runner.invoke(cli, ['add', 'a.txt'])
        runner.invoke(cli, ['commit', '-m', 'Initial'])

        result = runner.invoke(cli, ['status'])
        assert "Nothing to commit, working tree clean" in result.output


def test_status_short(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('a.txt').write_text('a')
        Path('b.txt').write_text('b')
        runner.invoke(cli, ['add', 'a.txt'])

        result = runner.invoke(cli, ['status', '--short'])
        assert result.output.splitlines() == ['staged-new\ta.txt', 'untracked\tb.txt']


def test_status_corrupt_index(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('.grove/index').write_bytes(b'DIRC garbage that is long enough to parse')

        result = runner.invoke(cli, ['status'])
        assert result.exit_code != 0
        assert "CorruptIndex" in result.output
