"""
JSON Recovery CLI Application.

Provides a command-line interface for recovering JSON from saved
grading-model responses.
"""

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from json_recovery.config import get_settings
from json_recovery.logging_config import configure_logging
from json_recovery.models import RepairResult
from json_recovery.repair import RepairEngine, RepairError

# Create Typer app
app = typer.Typer(
    name="json-recovery",
    help="Recover valid JSON from raw generative-model output",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


@app.command()
def repair(
    source: Annotated[
        str,
        typer.Argument(help="Path to the raw response file, or '-' for stdin"),
    ] = "-",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the repaired JSON to this file"),
    ] = None,
    max_attempts: Annotated[
        Optional[int],
        typer.Option("--max-attempts", "-n", min=1, help="Parse attempts before giving up"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show the repairs that were applied"),
    ] = False,
) -> None:
    """
    Recover JSON from a raw model response.

    The repaired value is printed as indented JSON, or written to --output.
    """
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    if source == "-":
        raw_text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            err_console.print(f"[red]Error:[/red] Response file not found: {path}")
            raise typer.Exit(1)
        raw_text = path.read_text(encoding="utf-8")

    engine = RepairEngine.from_settings(settings)
    if max_attempts is not None:
        engine = RepairEngine(
            max_attempts=max_attempts,
            backscan_window=settings.repair_backscan_window,
            excerpt_radius=settings.repair_excerpt_radius,
        )

    try:
        result = engine.repair(raw_text)
    except RepairError as e:
        _display_failure(e)
        raise typer.Exit(1)

    if verbose:
        _display_steps(result)

    rendered = json.dumps(result.value, indent=2, ensure_ascii=False)
    if output:
        output.write_text(rendered + "\n", encoding="utf-8")
        err_console.print(f"[green]Repaired JSON saved to:[/green] {output}")
    else:
        # Plain print so the output stays pipeable
        typer.echo(rendered)


@app.command("settings")
def show_settings() -> None:
    """Show the effective repair configuration."""
    current = get_settings()

    table = Table(title="JSON Recovery Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Max attempts", str(current.repair_max_attempts))
    table.add_row("Backscan window", str(current.repair_backscan_window))
    table.add_row("Excerpt radius", str(current.repair_excerpt_radius))
    table.add_row("Log level", current.log_level)

    console.print(table)


def _display_failure(error: RepairError) -> None:
    """Show a recovery failure with its diagnostic and excerpt."""
    lines = [f"[bold]{type(error).__name__}[/bold]: {escape(str(error))}"]
    lines.append(f"Attempts: {error.attempts}")
    if error.diagnostic is not None:
        lines.append(f"Repair class: {error.diagnostic.kind.value}")
    if error.excerpt:
        lines.append(f"\n[dim]{escape(error.excerpt)}[/dim]")

    err_console.print(Panel("\n".join(lines), title="[red]Recovery Failed[/red]"))


def _display_steps(result: RepairResult) -> None:
    """Display the repairs applied during recovery."""
    if not result.repaired:
        err_console.print(
            f"[green]Parsed without positional repairs[/green] ({result.attempts} attempt)"
        )
        return

    table = Table(title="Repairs Applied")
    table.add_column("Attempt", justify="right")
    table.add_column("Class", style="cyan")
    table.add_column("Offset", justify="right")
    table.add_column("Action")

    for step in result.steps:
        table.add_row(str(step.attempt), step.kind.value, str(step.offset), step.action)

    err_console.print(table)


if __name__ == "__main__":
    app()
