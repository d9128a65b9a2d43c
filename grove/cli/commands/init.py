"""Initialize a new Grove repository."""

import click
from pathlib import Path

from grove.core.repository import Repository, GUARD_FILE
from grove.cli.output import success, info, reports_errors


@click.command('init')
@click.argument('path', default='.')
@reports_errors
def init_cmd(path):
    """
    Initialize a new Grove repository.

    Creates a .grove directory with the object store, refs and HEAD,
    plus the .grove-allowed guard file that enables commands which
    modify the index or refs.

    Examples:
        grove init                    # Initialize in current directory
        grove init my-project         # Initialize in my-project directory
    """
    repo = Repository(str(Path(path)))
    repo.init()

    click.echo(success(f"Initialized empty Grove repository in {repo.grove_dir}"))
    click.echo(info(f"Created guard file {GUARD_FILE}; delete it to make the repository read-only"))
