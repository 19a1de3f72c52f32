"""CLI entry point for gitvault.

This module defines the Click-based command-line interface for gitvault.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from gitvault import __version__
from gitvault.cli.commands import add, branches, commit, log, pull, push, repos, status
from gitvault.cli.context import CLIContext, ExitCode
from gitvault.config import load_config
from gitvault.exceptions import ConfigError
from gitvault.logging import configure_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="gitvault")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides the user config).",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help="Directory holding repositories.json (default: ~/.gitvault).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    data_dir: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """gitvault - manage many Git repositories from one place."""
    ctx.ensure_object(dict)

    # Load configuration first (before logging setup)
    overrides = {"data_dir": data_dir} if data_dir else {}
    config_path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        # Can't use logging yet, just output error
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(
        config=config,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
    )

    # Priority: quiet > verbose > config
    verbosity_map = {
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
    }

    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = verbosity_map.get(config.verbosity, logging.WARNING)

    configure_logging(level=level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(repos)
cli.add_command(status)
cli.add_command(log)
cli.add_command(branches)
cli.add_command(add)
cli.add_command(commit)
cli.add_command(pull)
cli.add_command(push)

if __name__ == "__main__":
    cli()
