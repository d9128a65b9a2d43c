"""Show-ref command - list references."""

import click

from grove.cli.output import open_repository, reports_errors


@click.command('show-ref')
@click.option('--heads', is_flag=True, help='Only show branches')
@click.option('--tags', is_flag=True, help='Only show tags')
@click.option('--head', 'show_head', is_flag=True, help='Include HEAD')
@reports_errors
def show_ref_cmd(heads, tags, show_head):
    """
    List references and the hashes they point to.

    Examples:
        grove show-ref
        grove show-ref --tags
    """
    repo = open_repository()
    refs = repo.refs

    if show_head:
        head = refs.resolve_head()
        if head:
            click.echo(f"{head} HEAD")

    prefixes = []
    if heads:
        prefixes.append('refs/heads/')
    if tags:
        prefixes.append('refs/tags/')
    if not prefixes:
        prefixes.append('refs/')

    for prefix in prefixes:
        for name, obj_hash in refs.list_refs(prefix):
            click.echo(f"{obj_hash} {name}")
