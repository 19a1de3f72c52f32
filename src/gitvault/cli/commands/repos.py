"""``gitvault repos``: manage the list of tracked repositories."""

from __future__ import annotations

import click

from gitvault.cli.common import (
    cli_error_handler,
    get_service,
    prompt_directory_picker,
    report_result,
)
from gitvault.cli.console import console
from gitvault.cli.context import ExitCode, async_command
from gitvault.cli.output import OutputFormat, format_json, repositories_table


@click.group()
def repos() -> None:
    """Manage tracked repositories."""
    pass


@repos.command("list")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@click.pass_context
@async_command
async def repos_list(ctx: click.Context, fmt: str) -> None:
    """List tracked repositories.

    Examples:
        gitvault repos list
        gitvault repos list --format json
    """
    with cli_error_handler():
        entries = await get_service(ctx).list_repositories()

    if fmt == OutputFormat.JSON:
        click.echo(format_json([entry.to_dict() for entry in entries]))
    elif not entries:
        click.echo("No repositories tracked. Add one with 'gitvault repos add PATH'.")
    else:
        console.print(repositories_table(entries))


@repos.command("add")
@click.argument("path", type=click.Path(file_okay=False, dir_okay=True))
@click.pass_context
@async_command
async def repos_add(ctx: click.Context, path: str) -> None:
    """Track the Git repository at PATH."""
    with cli_error_handler():
        result = await get_service(ctx).add_repository(path)
    report_result(ctx, result, f"Added {path}")


@repos.command("remove")
@click.argument("path", type=click.Path(file_okay=False, dir_okay=True))
@click.pass_context
@async_command
async def repos_remove(ctx: click.Context, path: str) -> None:
    """Stop tracking the repository at PATH."""
    with cli_error_handler():
        result = await get_service(ctx).remove_repository(path)
    report_result(ctx, result, f"Removed {path}")


@repos.command("pick")
@click.pass_context
@async_command
async def repos_pick(ctx: click.Context) -> None:
    """Choose a folder interactively and track it."""
    with cli_error_handler():
        service = get_service(ctx, directory_picker=prompt_directory_picker)
        path = await service.select_directory()
        if path is None:
            click.echo("No folder selected.")
            raise SystemExit(ExitCode.SUCCESS)
        result = await service.add_repository(path)
    report_result(ctx, result, f"Added {path}")
