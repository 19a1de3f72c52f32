"""Git operation commands: status, log, branches, add, commit, pull, push."""

from __future__ import annotations

import click

from gitvault.cli.common import (
    cli_error_handler,
    get_service,
    report_result,
    require_work_tree,
)
from gitvault.cli.console import console
from gitvault.cli.context import async_command
from gitvault.cli.output import OutputFormat, format_json, log_table, status_table

_repo_path = click.argument(
    "path",
    type=click.Path(file_okay=False, dir_okay=True),
    default=".",
    required=False,
)

_format_option = click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)


@click.command()
@_repo_path
@_format_option
@click.pass_context
@async_command
async def status(ctx: click.Context, path: str, fmt: str) -> None:
    """Show changed files in the repository at PATH."""
    with cli_error_handler():
        require_work_tree(path)
        entries = await get_service(ctx).status(path)

    if fmt == OutputFormat.JSON:
        click.echo(format_json([entry.to_dict() for entry in entries]))
    elif not entries:
        click.echo("Nothing to commit.")
    else:
        console.print(status_table(entries))


@click.command()
@_repo_path
@_format_option
@click.pass_context
@async_command
async def log(ctx: click.Context, path: str, fmt: str) -> None:
    """Show recent commits in the repository at PATH."""
    with cli_error_handler():
        require_work_tree(path)
        commits = await get_service(ctx).log(path)

    if fmt == OutputFormat.JSON:
        click.echo(format_json([commit.to_dict() for commit in commits]))
    elif not commits:
        click.echo("No commits.")
    else:
        console.print(log_table(commits))


@click.command()
@_repo_path
@_format_option
@click.pass_context
@async_command
async def branches(ctx: click.Context, path: str, fmt: str) -> None:
    """List local and remote-tracking branches of the repository at PATH."""
    with cli_error_handler():
        require_work_tree(path)
        names = await get_service(ctx).branches(path)

    if fmt == OutputFormat.JSON:
        click.echo(format_json(names))
    else:
        for name in names:
            click.echo(name)


@click.command()
@_repo_path
@click.pass_context
@async_command
async def add(ctx: click.Context, path: str) -> None:
    """Stage all changes in the repository at PATH."""
    with cli_error_handler():
        result = await get_service(ctx).add(path)
    report_result(ctx, result, "Staged all changes.")


@click.command()
@_repo_path
@click.option("-m", "--message", required=True, help="Commit message.")
@click.pass_context
@async_command
async def commit(ctx: click.Context, path: str, message: str) -> None:
    """Commit staged changes in the repository at PATH.

    Examples:
        gitvault commit ~/src/project -m 'fix: keep "quotes" and $vars'
    """
    with cli_error_handler():
        result = await get_service(ctx).commit(path, message)
    report_result(ctx, result, "Committed.")


@click.command()
@_repo_path
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
@async_command
async def pull(ctx: click.Context, path: str, as_json: bool) -> None:
    """Pull the current branch from origin."""
    with cli_error_handler():
        result = await get_service(ctx).pull(path)
    report_result(ctx, result, "Pulled.", as_json=as_json)


@click.command()
@_repo_path
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
@async_command
async def push(ctx: click.Context, path: str, as_json: bool) -> None:
    """Push the current branch to origin."""
    with cli_error_handler():
        result = await get_service(ctx).push(path)
    report_result(ctx, result, f"Pushed {result.branch or 'branch'}.", as_json=as_json)
