"""CLI output utilities and formatting."""

import functools

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.repository import Repository


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def open_repository() -> Repository:
    """Find the repository containing the current directory."""
    return Repository.open('.')


def reports_errors(func):
    """
    Print Grove errors in red on stderr and exit non-zero.

    Each error is shown with its class name so scripts can tell
    ObjectNotFound from CorruptIndex without parsing prose.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GroveError as e:
            click.echo(error(f"{type(e).__name__}: {e}"), err=True)
            raise click.Abort()
        except OSError as e:
            click.echo(error(str(e)), err=True)
            raise click.Abort()
    return wrapper
