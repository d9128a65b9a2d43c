"""Log command - show commit history."""

import click
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from colorama import Fore, Style

from grove.operations.commit import iter_history
from grove.cli.output import info, open_repository, reports_errors


def format_timestamp(timestamp: int, tz: str) -> str:
    """Render a commit time in its recorded zone, e.g. 'Mon Jan 01 12:00:00 2024 +0100'."""
    sign = -1 if tz.startswith('-') else 1
    offset = timedelta(hours=int(tz[1:3]), minutes=int(tz[3:5])) * sign
    dt = datetime.fromtimestamp(timestamp, timezone(offset))
    return f"{dt.strftime('%a %b %d %H:%M:%S %Y')} {tz}"


def refs_by_commit(repo):
    """Map commit hash -> decoration names (branches and peeled tags)."""
    decorations = defaultdict(list)
    for name, commit_hash in repo.refs.list_branches():
        decorations[commit_hash].append(name)
    for name, obj_hash in repo.refs.list_tags():
        decorations[repo.refs.peel(obj_hash)].append(f"tag: {name}")
    return decorations


@click.command('log')
@click.argument('revision', default='HEAD')
@click.option('--oneline', is_flag=True, help='Show each commit on a single line')
@click.option('-n', '--max-count', type=int, help='Limit the number of commits shown')
@reports_errors
def log_cmd(revision, oneline, max_count):
    """
    Show commit history, following first parents.

    Examples:
        grove log
        grove log --oneline
        grove log -n 5 main
    """
    repo = open_repository()
    if revision == 'HEAD' and repo.refs.resolve_head() is None:
        click.echo(info("No commits yet"))
        return

    decorations = refs_by_commit(repo)

    for count, (commit_hash, commit) in enumerate(iter_history(repo, revision)):
        if max_count is not None and count >= max_count:
            break

        names = decorations.get(commit_hash)
        decoration = f" {Fore.CYAN}({', '.join(names)}){Style.RESET_ALL}" if names else ''

        if oneline:
            click.echo(f"{Fore.YELLOW}{commit_hash[:7]}{Style.RESET_ALL}{decoration} {commit.summary}")
            continue

        click.echo(f"{Fore.YELLOW}commit {commit_hash}{Style.RESET_ALL}{decoration}")
        click.echo(f"Author: {commit.author}")
        click.echo(f"Date:   {format_timestamp(commit.author_time, commit.author_timezone)}")
        click.echo()
        for line in commit.message.rstrip('\n').splitlines():
            click.echo(f"    {line}")
        click.echo()
