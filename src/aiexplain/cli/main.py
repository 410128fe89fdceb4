"""
aiexplain CLI - AI-assisted MySQL EXPLAIN analysis.

Usage:
    aiexplain env
    aiexplain "SELECT * FROM orders o JOIN customers c ON o.cid = c.id"
    aiexplain explain --no-show-schema "SELECT ..."
    aiexplain explain --no-stream "EXPLAIN SELECT ..."
    aiexplain --help
"""

from __future__ import annotations

import logging
import sys
from typing import Annotated, Optional

import typer
from rich.console import Console

from aiexplain import __version__
from aiexplain.cli.commands import env as env_commands
from aiexplain.cli.commands import explain as explain_commands

app = typer.Typer(
    name="aiexplain",
    help="Explain a MySQL query with its schema and plan, and ask an LLM how to optimize it",
    no_args_is_help=True,
)

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

COMMANDS = ("explain", "env")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"aiexplain version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging on stderr."),
    ] = False,
) -> None:
    """aiexplain - AI-assisted MySQL EXPLAIN analysis."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format=LOG_FORMAT,
    )


env_commands.register(app)
explain_commands.register(app)


def default_to_explain(args: list[str]) -> list[str]:
    """Treat `aiexplain "<sql>"` as `aiexplain explain "<sql>"`."""
    for i, arg in enumerate(args):
        if arg.startswith("-"):
            continue
        if arg in COMMANDS:
            return args
        return [*args[:i], "explain", *args[i:]]
    return args


def run() -> None:
    """Console entry point."""
    app(args=default_to_explain(sys.argv[1:]), prog_name="aiexplain")


if __name__ == "__main__":
    run()
