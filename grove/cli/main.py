"""Main CLI entry point for Grove."""

import logging

import click
from colorama import init

from grove import __version__
from grove.cli.commands import (init_cmd, add_cmd, rm_cmd, commit_cmd, config_cmd,
                                status_cmd, log_cmd, checkout_cmd, show_ref_cmd, tag_cmd,
                                ls_tree_cmd, cat_file_cmd, hash_object_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', count=True, help='Log progress (-v) or internals (-vv) to stderr')
def cli(verbose):
    """Grove - a content-addressable version control store."""
    logging.basicConfig(
        level=LOG_LEVELS.get(verbose, logging.DEBUG),
        format='%(levelname)s %(name)s: %(message)s',
    )


# Register commands
cli.add_command(init_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(add_cmd)
cli.add_command(rm_cmd)
cli.add_command(commit_cmd)
cli.add_command(status_cmd)
cli.add_command(checkout_cmd)
cli.add_command(log_cmd)
cli.add_command(tag_cmd)
cli.add_command(show_ref_cmd)
cli.add_command(config_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
