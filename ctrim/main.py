#!/usr/bin/env python3
"""
Trims a C file by discarding unwanted functions.

Usage:
    ctrim --keep main --blacklist debug_dump -o trimmed.txt input.c
"""

import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError

from ctrim.config import TrimConfig
from ctrim.console import Console, setup_logging
from ctrim.errors import TrimError
from ctrim.trim import run_trim


def _show_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    # Asking for help never counts as a successful run
    ctx.exit(1)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.command(context_settings={"help_option_names": []})
@click.argument("inputs", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "-k", "--keep", multiple=True, metavar="SYMBOL", help="Retain a particular function."
)
@click.option(
    "-b",
    "--blacklist",
    multiple=True,
    metavar="SYMBOL",
    help="Never emit a particular symbol.",
)
@click.option(
    "-o", "--output", metavar="FILE", help="Write output to file, rather than stdout."
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with keep, blacklist, clang_args and output settings",
)
@click.option(
    "--clang-arg",
    "clang_args",
    multiple=True,
    metavar="ARG",
    help="Extra argument passed to the C parser, e.g. -Iinclude",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug information to stderr")
@click.option(
    "-?",
    "--help",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_show_help,
    help="Show this message and exit.",
)
def cli(
    inputs: tuple[Path, ...],
    keep: tuple[str, ...],
    blacklist: tuple[str, ...],
    output: str | None,
    config_file: Path | None,
    clang_args: tuple[str, ...],
    verbose: bool,
):
    """Trims a C file by discarding unwanted functions.

    Functions named with --keep are retained together with every function
    they call, directly or indirectly. Declarations are written one token
    per line.
    """
    console = Console()
    setup_logging(console, verbose)

    if not inputs:
        _fail("no input file provided")
    if len(inputs) > 1:
        _fail("multiple input files are not supported")
    input_path = inputs[0]

    try:
        if config_file:
            base = TrimConfig.load_from_file(config_file, input_path)
        else:
            base = TrimConfig(input_path=input_path)
    except (OSError, ValueError, ValidationError) as e:
        _fail(f"invalid config file {config_file}: {e}")

    config = base.merged_with(
        keep=keep, blacklist=blacklist, clang_args=clang_args, output=output
    )

    try:
        result = run_trim(config)
    except TrimError as e:
        _fail(str(e))

    if verbose:
        console.print(f"[green]Kept {len(result.keep)} symbols[/green]")
        if result.added:
            console.print(f"Added by call graph: {', '.join(sorted(result.added))}")
        console.print(f"Declarations emitted: {result.emitted}")


if __name__ == "__main__":
    cli()
