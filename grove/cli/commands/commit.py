"""Commit command - record the index as a new commit."""

import click

from grove.core.errors import NothingToCommit
from grove.operations.commit import commit
from grove.cli.output import success, info, open_repository, reports_errors


@click.command('commit')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('--author', help="Override the author, as 'Name <email>'")
@reports_errors
def commit_cmd(message, author):
    """
    Record changes to the repository.

    Examples:
        grove commit -m "Initial commit"
        grove commit -m "Fix typo" --author "Ada <ada@example.com>"
    """
    repo = open_repository()

    try:
        commit_hash = commit(repo, message, author=author)
    except NothingToCommit as e:
        click.echo(info(str(e)))
        return

    branch = repo.refs.get_current_branch() or 'detached HEAD'
    summary = message.splitlines()[0] if message else ''
    click.echo(success(f"[{branch} {commit_hash[:7]}] {summary}"))
