from __future__ import annotations

import contextlib
from collections.abc import Generator
from pathlib import Path

import click

from gitvault.cli.console import console
from gitvault.cli.context import CLIContext, ExitCode
from gitvault.cli.output import format_error, format_json, format_success
from gitvault.exceptions import GitError, GitVaultError, NotARepositoryError
from gitvault.logging import get_logger
from gitvault.models import OperationResult
from gitvault.service import DirectoryPicker, GitVaultService

__all__ = [
    "cli_error_handler",
    "get_cli_context",
    "get_service",
    "prompt_directory_picker",
    "report_result",
    "require_work_tree",
]


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    Handles common error patterns across CLI commands:
    - KeyboardInterrupt: Exit with code 130
    - GitError: Format error with operation details
    - GitVaultError: Format error with message
    - Generic exceptions: Log and format error

    Example:
        >>> with cli_error_handler():
        >>>     run_command()
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except GitError as e:
        error_msg = format_error(
            e.message,
            details=[f"Operation: {e.operation}"] if e.operation else None,
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except GitVaultError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("Unexpected error in command")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e


def get_cli_context(ctx: click.Context) -> CLIContext:
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    return cli_ctx


def prompt_directory_picker() -> str | None:
    """Terminal stand-in for a native folder picker.

    Returns:
        The chosen directory, or None if the user entered nothing.
    """
    chosen: str = click.prompt(
        "Repository folder",
        default="",
        show_default=False,
        type=click.Path(file_okay=False, dir_okay=True),
    )
    return chosen or None


def get_service(
    ctx: click.Context, directory_picker: DirectoryPicker | None = None
) -> GitVaultService:
    """Build the service facade from the loaded CLI configuration."""
    cli_ctx = get_cli_context(ctx)
    return GitVaultService(config=cli_ctx.config, directory_picker=directory_picker)


def report_result(
    ctx: click.Context,
    result: OperationResult,
    success_message: str,
    *,
    as_json: bool = False,
) -> None:
    """Print an OperationResult and exit non-zero on failure."""
    cli_ctx = get_cli_context(ctx)

    if as_json:
        click.echo(format_json(result.to_dict()))
    elif result.success:
        if result.output and not cli_ctx.quiet:
            console.print(result.output, markup=False, highlight=False)
        click.echo(format_success(success_message))
    else:
        details = (
            result.details.splitlines()
            if result.details and cli_ctx.show_details
            else None
        )
        click.echo(format_error(result.error or "Unknown error", details=details), err=True)

    if not result.success:
        raise SystemExit(ExitCode.FAILURE)


def require_work_tree(path: str) -> None:
    """Fail early when PATH has no ``.git`` entry.

    The service answers a failed query with an empty list, so query commands
    check the path first.

    Raises:
        NotARepositoryError: If ``path/.git`` does not exist.
    """
    if not (Path(path).expanduser() / ".git").exists():
        raise NotARepositoryError(f"Not a Git repository: {path}", path=path)
