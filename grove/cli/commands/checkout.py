"""Checkout command - export a commit into an empty directory."""

import click

from grove.operations.checkout import checkout
from grove.cli.output import success, open_repository, reports_errors


@click.command('checkout')
@click.argument('revision')
@click.argument('target_dir', type=click.Path(file_okay=False))
@reports_errors
def checkout_cmd(revision, target_dir):
    """
    Write the tree of REVISION into TARGET_DIR.

    TARGET_DIR must be empty or not exist yet; existing content is never
    overwritten. The repository's HEAD and index are left untouched.

    Examples:
        grove checkout HEAD ../export
        grove checkout v1.0 /tmp/release
    """
    repo = open_repository()
    commit_hash = repo.refs.resolve_commit(revision)
    written = checkout(repo, commit_hash, target_dir)
    click.echo(success(f"Checked out {commit_hash[:7]} into {target_dir} ({len(written)} files)"))
