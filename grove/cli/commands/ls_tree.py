"""Plumbing commands: hash-object, cat-file, ls-tree."""

import click
from pathlib import Path
from colorama import Fore, Style

from grove.core.hash import hash_object
from grove.core.objects import Blob, Tree, decode, frame, mode_type
from grove.operations.tree import flatten, read_tree, tree_of
from grove.cli.output import open_repository, reports_errors


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the object into the object store')
@click.option('-t', '--type', 'kind', default='blob',
              type=click.Choice(['blob', 'tree', 'commit', 'tag']), help='Object type (default: blob)')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@reports_errors
def hash_object_cmd(write, kind, path):
    """
    Compute the object hash of a file, optionally storing it.

    Non-blob types are parsed first, so malformed input is rejected
    before anything is written.

    Examples:
        grove hash-object file.txt
        grove hash-object -w file.txt
    """
    body = Path(path).read_bytes()
    if kind != 'blob':
        decode(kind, body)

    if write:
        repo = open_repository()
        obj_hash = repo.objects.write_raw(kind, body)
    else:
        obj_hash = hash_object(frame(kind, body))
    click.echo(obj_hash)


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('revision')
@reports_errors
def cat_file_cmd(show_type, show_size, pretty, revision):
    """
    Show object content, type, or size.

    REVISION may be a full or abbreviated hash, a branch, a tag or HEAD.

    Examples:
        grove cat-file -t abc123     # Show object type
        grove cat-file -s abc123     # Show object size
        grove cat-file -p HEAD       # Pretty-print object content
    """
    repo = open_repository()
    obj_hash = repo.refs.resolve_reference(revision)
    kind, body = repo.objects.read_raw(obj_hash)

    if show_type:
        click.echo(kind)
        return

    if show_size:
        click.echo(len(body))
        return

    if not pretty:
        click.echo(body, nl=False)
        return

    obj = decode(kind, body)
    if isinstance(obj, Tree):
        for entry in obj.entries:
            click.echo(f"{entry.mode:06o} {entry.type} {entry.hash}\t{entry.name}")
    elif isinstance(obj, Blob):
        click.echo(obj.data, nl=False)
    else:
        click.echo(f"{Fore.YELLOW}{body.decode('utf-8', 'replace')}{Style.RESET_ALL}", nl=False)


@click.command('ls-tree')
@click.option('-r', '--recursive', is_flag=True, help='Recurse into sub-trees')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.argument('treeish', required=False, default='HEAD')
@reports_errors
def ls_tree_cmd(recursive, name_only, treeish):
    """
    List contents of a tree object.

    TREEISH can be a commit hash, tree hash, branch name, or tag. Defaults to HEAD.

    Examples:
        grove ls-tree                  # Show tree for HEAD
        grove ls-tree -r main          # Recursively list all files
        grove ls-tree --name-only HEAD # Only show file names
    """
    repo = open_repository()
    tree_hash = tree_of(repo.objects, repo.refs.resolve_reference(treeish))

    if recursive:
        rows = [(mode, path, obj_hash) for path, (mode, obj_hash) in flatten(repo.objects, tree_hash).items()]
    else:
        rows = [(e.mode, e.name, e.hash) for e in read_tree(repo.objects, tree_hash).entries]

    for mode, name, obj_hash in rows:
        if name_only:
            click.echo(name)
        else:
            click.echo(f"{mode:06o} {mode_type(mode)} {obj_hash}\t{name}")
