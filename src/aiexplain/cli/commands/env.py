"""Bootstrap command: env."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from aiexplain.envfile import write_env_template

console = Console()


def register(app: typer.Typer) -> None:
    """Register the env command on the given Typer app."""

    @app.command()
    def env(
        path: Annotated[
            Path,
            typer.Option("--path", "-p", help="Where to write the template"),
        ] = Path(".env"),
        force: Annotated[
            bool,
            typer.Option("--force", "-f", help="Overwrite an existing file"),
        ] = False,
    ) -> None:
        """
        Generate a .env file with MySQL and AI settings.

        Examples:

            $ aiexplain env
            $ aiexplain env --path config/.env --force
        """
        if not write_env_template(path, force=force):
            console.print(f"[yellow]{path} already exists[/yellow] (use --force to overwrite)")
            return

        console.print(f"[green]Created {path}[/green]")
