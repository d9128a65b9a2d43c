"""Status command - show working tree status."""

import click
from colorama import Fore, Style

from grove.operations.status import FileStatus, compute_status
from grove.cli.output import success, info, open_repository, reports_errors

STAGED_LABELS = [
    (FileStatus.STAGED_NEW, 'new file:   '),
    (FileStatus.STAGED_MODIFIED, 'modified:   '),
    (FileStatus.STAGED_DELETED, 'deleted:    '),
]

UNSTAGED_LABELS = [
    (FileStatus.UNSTAGED_MODIFIED, 'modified:   '),
    (FileStatus.UNSTAGED_DELETED, 'deleted:    '),
]


@click.command('status')
@click.option('--force-hash', is_flag=True, help='Re-hash every tracked file instead of trusting stat data')
@click.option('-s', '--short', is_flag=True, help='One line per changed path')
@reports_errors
def status_cmd(force_hash, short):
    """
    Show the working tree status.

    Displays:
    - Changes staged for commit (index vs HEAD)
    - Changes not staged for commit (working tree vs index)
    - Untracked files

    Examples:
        grove status
        grove status --short
        grove status --force-hash
    """
    repo = open_repository()
    report = compute_status(repo, force_hash=force_hash)

    if short:
        for path, statuses in report.changed_paths().items():
            click.echo(f"{' '.join(s.value for s in statuses)}\t{path}")
        return

    refs = repo.refs
    if refs.is_detached_head():
        click.echo(f"{Fore.YELLOW}HEAD detached at {report.head_commit[:7]}{Style.RESET_ALL}")
    else:
        click.echo(f"On branch {Fore.CYAN}{refs.get_current_branch()}{Style.RESET_ALL}")
    if report.head_commit is None:
        click.echo("\nNo commits yet")
    click.echo()

    has_staged = any(report.paths(status) for status, _ in STAGED_LABELS)
    if has_staged:
        click.echo(Fore.GREEN + "Changes to be committed:" + Style.RESET_ALL)
        click.echo(info("  (use \"grove rm --cached <file>...\" to unstage)"))
        click.echo()
        for status, label in STAGED_LABELS:
            for path in report.paths(status):
                click.echo(f"  {Fore.GREEN}{label}{path}{Style.RESET_ALL}")
        click.echo()

    has_unstaged = any(report.paths(status) for status, _ in UNSTAGED_LABELS)
    if has_unstaged:
        click.echo(Fore.YELLOW + "Changes not staged for commit:" + Style.RESET_ALL)
        click.echo(info("  (use \"grove add <file>...\" to update what will be committed)"))
        click.echo()
        for status, label in UNSTAGED_LABELS:
            for path in report.paths(status):
                click.echo(f"  {Fore.YELLOW}{label}{path}{Style.RESET_ALL}")
        click.echo()

    untracked = report.paths(FileStatus.UNTRACKED)
    if untracked:
        click.echo(Fore.RED + "Untracked files:" + Style.RESET_ALL)
        click.echo(info("  (use \"grove add <file>...\" to include in what will be committed)"))
        click.echo()
        for path in untracked:
            click.echo(f"  {Fore.RED}{path}{Style.RESET_ALL}")
        click.echo()

    if report.is_clean():
        click.echo(success("Nothing to commit, working tree clean"))
    elif not has_staged:
        click.echo(info("No changes added to commit (use \"grove add\")"))
