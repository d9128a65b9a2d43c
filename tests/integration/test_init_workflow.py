"""Integration tests for repository initialization."""

from pathlib import Path
from click.testing import CliRunner

from grove.cli.main import cli


def test_init_command(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ['init'])
        assert result.exit_code == 0
        assert "Initialized empty Grove repository" in result.output
        assert Path('.grove/objects').is_dir()
        assert Path('.grove/refs/heads').is_dir()
        assert Path('.grove-allowed').is_file()
        assert Path('.grove/HEAD').read_text() == 'ref: refs/heads/main\n'


def test_init_into_new_directory(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ['init', 'project'])
        assert result.exit_code == 0
        assert Path('project/.grove').is_dir()


def test_double_init_fails(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        result = runner.invoke(cli, ['init'])
        assert result.exit_code != 0
        assert "RepositoryExists" in result.output


def test_command_outside_repository(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ['status'])
        assert result.exit_code != 0
        assert "NotARepository" in result.output


def test_version():
    result = CliRunner().invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert '0.1.0' in result.output
