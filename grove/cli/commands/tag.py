"""Tag command - create, list, and delete tags."""

import click
from colorama import Fore, Style

from grove.core.errors import InvalidReference
from grove.core.objects import Tag
from grove.operations.tag import create_tag
from grove.cli.output import success, info, open_repository, reports_errors


@click.command('tag')
@click.argument('name', required=False)
@click.argument('target', required=False, default='HEAD')
@click.option('-m', '--message', help='Create an annotated tag with this message')
@click.option('-f', '--force', is_flag=True, help='Replace an existing tag')
@click.option('-d', '--delete', is_flag=True, help='Delete the tag')
@click.option('-l', '--list', 'list_tags', is_flag=True, help='List tags')
@reports_errors
def tag_cmd(name, target, message, force, delete, list_tags):
    """
    Create, list, or delete tags.

    Without -m a lightweight tag is created; with -m a tag object holding
    the tagger and message is stored.

    Examples:
        grove tag                       # List tags
        grove tag v1.0                  # Lightweight tag at HEAD
        grove tag -m "Release" v1.0 abc123
        grove tag -d v1.0
    """
    repo = open_repository()

    if list_tags or not name:
        tags = repo.refs.list_tags()
        if not tags:
            click.echo(info("No tags"))
        for tag_name, obj_hash in tags:
            obj = repo.objects.read(obj_hash)
            if isinstance(obj, Tag):
                click.echo(f"{Fore.YELLOW}{tag_name}{Style.RESET_ALL}  {obj.message.splitlines()[0] if obj.message else ''}")
            else:
                click.echo(f"{Fore.YELLOW}{tag_name}{Style.RESET_ALL}")
        return

    if delete:
        if not repo.refs.delete_ref(f'refs/tags/{name}'):
            raise InvalidReference(f"Tag '{name}' not found")
        click.echo(success(f"Deleted tag {name}"))
        return

    ref_hash = create_tag(repo, name, target, message=message, force=force)
    kind = 'annotated tag' if message is not None else 'tag'
    click.echo(success(f"Created {kind} {name} ({ref_hash[:7]})"))
