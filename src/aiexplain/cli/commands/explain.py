"""Core analysis command: explain."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from aiexplain.config import DEFAULT_ENV_FILE, load_config
from aiexplain.db.connection import open_connection
from aiexplain.engine import AnalysisService
from aiexplain.exceptions import AiExplainError
from aiexplain.explainer import get_explainer
from aiexplain.output.renderers import render_context, render_json
from aiexplain.prompts import build_prompt

console = Console()
error_console = Console(stderr=True)


def _print_fragment(fragment: str) -> None:
    console.print(fragment, end="", markup=False, emoji=False, highlight=False, soft_wrap=True)


def register(app: typer.Typer) -> None:
    """Register the explain command on the given Typer app."""

    @app.command()
    def explain(
        ctx: typer.Context,
        sql: Annotated[
            Optional[str],
            typer.Argument(
                help="SQL query to analyze; a leading EXPLAIN is ignored",
                show_default=False,
            ),
        ] = None,
        env_file: Annotated[
            Path,
            typer.Option("--env-file", "-e", help="Settings file to load"),
        ] = Path(DEFAULT_ENV_FILE),
        show_schema: Annotated[
            bool,
            typer.Option(
                "--show-schema/--no-show-schema",
                help="Print columns, indexes and DDL of each table",
            ),
        ] = True,
        stream: Annotated[
            bool,
            typer.Option(
                "--stream/--no-stream",
                help="Print the analysis as it arrives, or all at once",
            ),
        ] = True,
        json_output: Annotated[
            bool,
            typer.Option(
                "--json",
                "-j",
                help="Print the analysis request as JSON and stop (no AI call)",
            ),
        ] = False,
        model: Annotated[
            Optional[str],
            typer.Option("--model", "-m", help="Override ai_model from the settings file"),
        ] = None,
    ) -> None:
        """
        Inspect the tables and plan of a query and ask an LLM for advice.

        Examples:

            $ aiexplain explain "SELECT * FROM orders WHERE status = 'paid'"
            $ aiexplain explain --no-show-schema "EXPLAIN SELECT * FROM t1 JOIN t2 ON t1.id = t2.tid"
        """
        if not sql:
            typer.echo(ctx.get_help())
            raise typer.Exit()

        try:
            config = load_config(env_file)
            if model:
                config = config.model_copy(update={"ai_model": model})

            with open_connection(config) as conn:
                prepared = AnalysisService(conn).prepare(sql)

            if json_output:
                console.print_json(render_json(prepared.request))
                return

            for item in render_context(prepared, show_schema=show_schema):
                console.print(item)

            prompt = build_prompt(prepared.request)
            explainer = get_explainer(config)

            console.print("\n[bold]AI analysis:[/bold]")
            if stream:
                result = explainer.explain(prompt, on_chunk=_print_fragment)
                if not result.skipped:
                    console.print()
            else:
                with console.status("Waiting for the model..."):
                    result = explainer.explain(prompt)
                if not result.skipped:
                    console.print(Markdown(result.text))

            if result.skipped:
                console.print(f"[yellow]{escape(result.text)}[/yellow]")

        except AiExplainError as e:
            error_console.print(f"[red bold]Error:[/red bold] {escape(e.message)}")
            raise typer.Exit(code=1)
