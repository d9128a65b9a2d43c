"""Add and rm commands - stage and unstage paths."""

import click
from pathlib import Path

from grove.core.errors import PathConflict
from grove.operations.status import working_files
from grove.utils.ignore import get_ignore_matcher
from grove.cli.output import success, error, info, warning, open_repository, reports_errors


def _under(path: str, prefix: str) -> bool:
    return not prefix or path == prefix or path.startswith(prefix + '/')


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
@click.option('-f', '--force', is_flag=True, help='Add ignored files')
@reports_errors
def add_cmd(paths, force):
    """
    Add file contents to the index.

    Directories are added recursively, skipping .groveignore matches.
    A tracked file that no longer exists is removed from the index.

    Examples:
        grove add file.txt
        grove add src
        grove add .
        grove add -f build/keep.o
    """
    repo = open_repository()
    index = repo.load_index()
    ignore_matcher = get_ignore_matcher(repo.work_tree)

    added = []
    removed = []
    ignored = []
    failed = []

    for pathspec in paths:
        full_path = Path(pathspec).absolute()
        try:
            rel_path = repo.relative_path(full_path)
        except ValueError:
            failed.append((pathspec, "outside repository"))
            continue
        rel_path = '' if rel_path == '.' else rel_path

        if rel_path and repo.is_internal(rel_path):
            failed.append((pathspec, "inside the control directory"))
            continue

        if full_path.is_file():
            if not force and ignore_matcher.is_ignored(rel_path):
                ignored.append(rel_path)
                continue
            index.add_file(repo, full_path)
            added.append(rel_path)
        elif full_path.is_dir():
            for path in working_files(repo, ignore_matcher):
                if _under(path, rel_path):
                    index.add_file(repo, repo.work_tree / path)
                    added.append(path)
            for path in index.paths():
                if _under(path, rel_path) and not (repo.work_tree / path).is_file():
                    index.remove(path)
                    removed.append(path)
        elif rel_path in index:
            index.remove(rel_path)
            removed.append(rel_path)
        else:
            failed.append((pathspec, "did not match any files"))

    if added or removed:
        repo.save_index(index)

    for path in added:
        click.echo(success(f"Added {path}"))
    for path in removed:
        click.echo(success(f"Removed {path}"))
    if ignored:
        click.echo(warning("The following paths are ignored by .groveignore:"))
        for path in ignored:
            click.echo(f"  {path}")
        click.echo(info("Use 'grove add -f <path>' to add them anyway"))
    for pathspec, reason in failed:
        click.echo(error(f"{pathspec}: {reason}"), err=True)

    if failed:
        raise click.Abort()


@click.command('rm')
@click.argument('paths', nargs=-1, required=True)
@click.option('--cached', is_flag=True, help='Only remove from the index, keep the working file')
@reports_errors
def rm_cmd(paths, cached):
    """
    Remove files from the index and, unless --cached, the working tree.

    Examples:
        grove rm old.txt
        grove rm --cached secrets.env
    """
    repo = open_repository()
    index = repo.load_index()

    targets = []
    for pathspec in paths:
        rel_path = repo.relative_path(Path(pathspec).absolute())
        if rel_path not in index:
            raise PathConflict(f"'{pathspec}' is not tracked")
        targets.append(rel_path)

    for rel_path in targets:
        index.remove(rel_path)
    repo.save_index(index)

    for rel_path in targets:
        if not cached:
            working_path = repo.work_tree / rel_path
            if working_path.is_file():
                working_path.unlink()
        click.echo(success(f"Removed {rel_path}"))
