"""
Command-line host for the calculator engine.

Provides commands for:
- Evaluating a token sequence
- Formatting a value for the display
- An interactive token prompt
"""

import logging
import sys

import structlog
import typer
from rich.console import Console
from rich.table import Table

from calcengine.config import AngleUnit, settings
from calcengine.core import CalculatorState
from calcengine.exceptions import InvalidInputError
from calcengine.formatting import format_display
from calcengine.session import Calculator
from calcengine.tokens import tokenize

app = typer.Typer(
    name="calcengine",
    help="Decimal calculator driven by key tokens",
    add_completion=False,
)

console = Console()


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Looked up per call so a replaced sys.stderr is honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str) -> None:
    """Route structlog output to stderr, filtered at the given level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=_stderr_logger,
    )


def _pending(state: CalculatorState) -> str:
    if state.operator is None:
        return ""
    return f"{state.previous_value} {state.operator.value}"


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", "-l", help="Log level"),
    degrees: bool = typer.Option(False, "--degrees", "-d", help="Trigonometry in degrees"),
):
    """Decimal calculator driven by key tokens."""
    configure_logging(log_level)
    if degrees:
        settings.angle_unit = AngleUnit.DEGREES


@app.command("eval")
def evaluate(
    tokens: list[str] = typer.Argument(..., help="Tokens, e.g. 12.5 x 4 ="),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show every transition"),
):
    """Feed tokens to a fresh calculator and print the display."""
    try:
        parsed = tokenize(" ".join(tokens))
    except InvalidInputError as e:
        console.print(str(e), style="red", markup=False)
        raise typer.Exit(2)

    calc = Calculator()
    table = Table(title="Transitions")
    table.add_column("Token", style="cyan")
    table.add_column("Display", style="green")
    table.add_column("Pending", style="magenta")
    table.add_column("Waiting", style="dim")

    for token in parsed:
        state = calc.press(token)
        table.add_row(token.value, state.display, _pending(state), str(state.waiting_for_operand))

    if trace:
        console.print(table)
    typer.echo(calc.display)


@app.command("format")
def format_value(
    value: str = typer.Argument(..., help="Decimal value"),
):
    """Print a value the way the display shows it."""
    typer.echo(format_display(value))


@app.command()
def repl():
    """Read token lines from stdin until 'quit'."""
    calc = Calculator()
    console.print("[bold]calcengine[/] - enter tokens, 'history', 'memory' or 'quit'")

    for line in sys.stdin:
        command = line.strip()
        if command in ("quit", "exit"):
            break

        if command == "history":
            table = Table(title="History")
            table.add_column("Expression", style="cyan")
            table.add_column("Result", style="green")
            for entry in calc.history:
                table.add_row(entry.expression, entry.result)
            console.print(table)
            continue

        if command == "memory":
            typer.echo(calc.memory.recall() if calc.memory.has_value else "(empty)")
            continue

        try:
            calc.feed_text(command)
        except InvalidInputError as e:
            console.print(str(e), style="red", markup=False)
            continue
        typer.echo(calc.display)


if __name__ == "__main__":
    app()
