"""CLI commands for Grove."""

from grove.cli.commands.init import init_cmd
from grove.cli.commands.add import add_cmd, rm_cmd
from grove.cli.commands.commit import commit_cmd
from grove.cli.commands.config import config_cmd
from grove.cli.commands.status import status_cmd
from grove.cli.commands.log import log_cmd
from grove.cli.commands.checkout import checkout_cmd
from grove.cli.commands.refs import show_ref_cmd
from grove.cli.commands.tag import tag_cmd
from grove.cli.commands.ls_tree import ls_tree_cmd, cat_file_cmd, hash_object_cmd

__all__ = ['init_cmd', 'add_cmd', 'rm_cmd', 'commit_cmd', 'config_cmd', 'status_cmd',
           'log_cmd', 'checkout_cmd', 'show_ref_cmd', 'tag_cmd',
           'ls_tree_cmd', 'cat_file_cmd', 'hash_object_cmd']
