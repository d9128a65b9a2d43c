"""Config command - manage repository and global configuration."""

import click

from grove.core.config import Config, get_config
from grove.core.repository import Repository
from grove.core.errors import NotARepository
from grove.cli.output import success, error, reports_errors


def _split_key(key):
    """'user.name' -> ('user', 'name'); bare keys go to [core]."""
    return tuple(key.split('.', 1)) if '.' in key else ('core', key)


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
@reports_errors
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        grove config set user.name "Your Name"
        grove config set --global user.email "you@example.com"
    """
    section, option = _split_key(key)
    if is_global:
        Config().set(section, option, value, global_config=True)
    else:
        repo = Repository.find_repository()
        if repo is None:
            raise NotARepository("Not a grove repository (use --global for global config)")
        get_config(repo).set(section, option, value)

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Read global config only')
def config_get(key, is_global):
    """
    Get a config value.

    Environment variables (GROVE_USER_NAME, ...) override both files.

    Examples:
        grove config get user.name
    """
    section, option = _split_key(key)
    repo = None if is_global else Repository.find_repository()
    value = get_config(repo).get(section, option)

    if value is None:
        click.echo(error(f"Config key not found: {key}"), err=True)
        raise click.Abort()
    click.echo(value)


@config_cmd.command('list')
@click.option('--global', 'is_global', is_flag=True, help='List global config only')
def config_list(is_global):
    """
    List all config values, repository values last.

    Examples:
        grove config list
    """
    repo = None if is_global else Repository.find_repository()
    config = get_config(repo)

    parsers = [config.global_config]
    if config.repo_config is not None:
        parsers.append(config.repo_config)

    for parser in parsers:
        for section in parser.sections():
            for option, value in parser.items(section):
                click.echo(f"{section}.{option}={value}")


@config_cmd.command('unset')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Unset in global config')
@reports_errors
def config_unset(key, is_global):
    """
    Remove a config value.

    Examples:
        grove config unset user.email
    """
    section, option = _split_key(key)
    if is_global:
        config = Config()
    else:
        repo = Repository.find_repository()
        if repo is None:
            raise NotARepository("Not a grove repository (use --global for global config)")
        config = get_config(repo)

    if not config.unset(section, option, global_config=is_global):
        click.echo(error(f"Config key not found: {key}"), err=True)
        raise click.Abort()
    click.echo(success(f"Unset {key}"))
