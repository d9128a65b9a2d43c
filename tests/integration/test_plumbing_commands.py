"""Integration tests for hash-object, cat-file and ls-tree."""

from pathlib import Path
from click.testing import CliRunner

from grove.cli.main import cli

HELLO_BLOB = 'ce013625030ba8dba906f756967f9e9ca394464a'


def test_hash_object_without_repository(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        Path('hello.txt').write_bytes(b'hello\n')
        result = runner.invoke(cli, ['hash-object', 'hello.txt'])
        assert result.exit_code == 0
        assert result.output.strip() == HELLO_BLOB


def test_hash_object_write_and_cat_file(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('hello.txt').write_bytes(b'hello\n')
        result = runner.invoke(cli, ['hash-object', '-w', 'hello.txt'])
        assert result.output.strip() == HELLO_BLOB

        assert runner.invoke(cli, ['cat-file', '-t', HELLO_BLOB[:7]]).output.strip() == 'blob'
        assert runner.invoke(cli, ['cat-file', '-s', HELLO_BLOB]).output.strip() == '6'
        assert runner.invoke(cli, ['cat-file', '-p', HELLO_BLOB]).output == 'hello\n'


def test_hash_object_rejects_malformed_tree(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('bad').write_bytes(b'100644 name-without-hash')
        result = runner.invoke(cli, ['hash-object', '-w', '-t', 'tree', 'bad'])
        assert result.exit_code != 0
        assert "MalformedObject" in result.output


def test_cat_file_missing(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        result = runner.invoke(cli, ['cat-file', '-p', 'f' * 40])
        assert result.exit_code != 0
        assert "InvalidReference" in result.output


def test_cat_file_commit(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('a.txt').write_text('a')
        runner.invoke(cli, ['add', 'a.txt'])
        runner.invoke(cli, ['commit', '-m', 'Hello commit'])

        result = runner.invoke(cli, ['cat-file', '-p', 'HEAD'])
        assert result.output.startswith('tree ')
        assert 'Hello commit' in result.output


def test_ls_tree(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        runner.invoke(cli, ['init'])
        Path('src').mkdir()
        Path('src/main.py').write_text('x')
        Path('README').write_text('r')
        runner.invoke(cli, ['add', '.'])
        runner.invoke(cli, ['commit', '-m', 'Initial'])

        lines = runner.invoke(cli, ['ls-tree']).output.splitlines()
        assert lines[0].startswith('100644 blob ')
        assert lines[0].endswith('\tREADME')
        assert lines[1].startswith('040000 tree ')
        assert lines[1].endswith('\tsrc')

        result = runner.invoke(cli, ['ls-tree', '-r', '--name-only', 'HEAD'])
        assert result.output.splitlines() == ['README', 'src/main.py']
