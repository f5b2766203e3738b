"""CLI interface for valkit using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from valkit import __description__, __version__
from valkit.config import LogLevel, OutputFormat, ValkitConfig, load_config
from valkit.errors import ConfigurationError, FunctionNotFoundError
from valkit.functions import FunctionResult, Registry, build_registry
from valkit.validation import DescriptionStyle
from valkit.values import Value

app = typer.Typer(
    name="valkit",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

# Exit codes: 0 = true/unknown, 1 = false, 2 = usage or configuration error
EXIT_FALSE = 1
EXIT_USAGE = 2

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def configure_logging(level: str) -> None:
    """Route valkit logging through a rich handler on stderr."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, markup=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"valkit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit")
    ] = False,
) -> None:
    """valkit - Catalog of single-value validation rules exposed as boolean functions."""


def _load(config: Path | None, log_level: str | None) -> tuple[ValkitConfig, Registry]:
    """Load configuration, set up logging and build the registry.

    Raises:
        typer.Exit: With EXIT_USAGE on configuration problems
    """
    try:
        valkit_config = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE) from e

    if log_level is not None and log_level not in _LOG_LEVELS:
        console.print(f"[red]Error:[/red] Invalid log level '{escape(log_level)}'. Must be one of: {', '.join(_LOG_LEVELS)}")
        raise typer.Exit(EXIT_USAGE)
    configure_logging(log_level or valkit_config.logging.level)

    try:
        registry = build_registry(valkit_config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE) from e

    return valkit_config, registry


def _resolve_format(format: str | None, valkit_config: ValkitConfig) -> str:
    output_format = format or valkit_config.output.format
    valid_formats = [f.value for f in OutputFormat]
    if output_format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{escape(output_format)}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(EXIT_USAGE)
    return output_format


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Configuration file path (default: search for .valkit.json)")
]
FormatOption = Annotated[
    Optional[str],
    typer.Option("--format", "-f", help="Output format: table, json, markdown (default: from config)")
]
LogLevelOption = Annotated[
    Optional[str],
    typer.Option("--log-level", help="Log level: error, warn, info, debug (default: from config)")
]


@app.command("functions")
def list_functions(
    format: FormatOption = None,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """List every function in the catalog."""
    valkit_config, registry = _load(config, log_level)
    output_format = _resolve_format(format, valkit_config)
    functions = registry.functions()

    if output_format == OutputFormat.JSON.value:
        typer.echo(jsonlib.dumps([f.definition().to_dict() for f in functions], indent=2))
    elif output_format == OutputFormat.MARKDOWN.value:
        console.print("# Functions", markup=False)
        console.print()
        for function in functions:
            parameter = function.parameter
            console.print(f"## {function.name}({parameter.name}: {parameter.type.value}) -> bool", markup=False)
            console.print()
            console.print(function.description(DescriptionStyle.MARKDOWN), markup=False)
            console.print()
    else:
        if not functions:
            console.print("[dim]No functions registered[/dim]")
            return

        table = Table(title=f"Functions ({len(functions)})")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Parameter", style="white")
        table.add_column("Description", style="white")

        for function in functions:
            parameter = function.parameter
            table.add_row(
                function.name,
                f"{parameter.name}: {parameter.type.value}",
                escape(function.description()),
            )

        console.print(table)


@app.command()
def describe(
    name: Annotated[str, typer.Argument(help="Function name")],
    markdown: Annotated[bool, typer.Option("--markdown", "-m", help="Print the markdown description")] = False,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Print the description of one function."""
    _, registry = _load(config, log_level)

    try:
        function = registry[name]
    except FunctionNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE) from e

    style = DescriptionStyle.MARKDOWN if markdown else DescriptionStyle.PLAIN
    parameter = function.parameter
    console.print(f"[cyan]{function.name}[/cyan]({parameter.name}: {parameter.type.value}) -> {function.return_type}")
    console.print(function.description(style), markup=False)


def _print_result(name: str, value: Value, result: FunctionResult, output_format: str) -> None:
    if output_format == OutputFormat.JSON.value:
        payload = {"function": name, "input": value.to_json(), **result.to_dict()}
        typer.echo(jsonlib.dumps(payload, indent=2))
        return

    rendered = str(result.value)
    if output_format == OutputFormat.MARKDOWN.value:
        console.print(f"**{name}**: `{rendered}`", markup=False)
        for diagnostic in result.diagnostics:
            console.print(f"- **{diagnostic.severity.value.upper()}** {diagnostic.summary}: {diagnostic.detail}", markup=False)
        return

    color = "green" if result.passed else "red" if result.failed else "yellow"
    console.print(f"[{color}]{rendered}[/{color}]")

    if result.diagnostics:
        table = Table()
        table.add_column("Severity", style="white")
        table.add_column("Summary", style="cyan")
        table.add_column("Detail", style="white")
        table.add_column("Attribute", style="dim")
        for diagnostic in result.diagnostics:
            severity_color = "red" if diagnostic.severity.value == "error" else "yellow"
            table.add_row(
                f"[{severity_color}]{diagnostic.severity.value.upper()}[/{severity_color}]",
                escape(diagnostic.summary),
                escape(diagnostic.detail),
                escape(diagnostic.attribute_path or ""),
            )
        console.print(table)


@app.command()
def call(
    name: Annotated[str, typer.Argument(help="Function name")],
    value: Annotated[Optional[str], typer.Argument(help="Value to validate")] = None,
    null: Annotated[bool, typer.Option("--null", help="Call with an explicitly null value")] = False,
    unknown: Annotated[bool, typer.Option("--unknown", help="Call with a not-yet-known value")] = False,
    format: FormatOption = None,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Call one function and print true, false or unknown."""
    if sum([value is not None, null, unknown]) != 1:
        console.print("[red]Error:[/red] Provide exactly one of VALUE, --null or --unknown")
        raise typer.Exit(EXIT_USAGE)

    valkit_config, registry = _load(config, log_level)
    output_format = _resolve_format(format, valkit_config)

    if null:
        input_value = Value.null()
    elif unknown:
        input_value = Value.unknown()
    else:
        input_value = Value.known(value)

    try:
        result = registry.call(name, input_value)
    except FunctionNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE) from e

    _print_result(name, input_value, result, output_format)

    if result.failed:
        raise typer.Exit(EXIT_FALSE)


@app.command("check-config")
def check_config(
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Validate the configuration and build the catalog."""
    _, registry = _load(config, log_level)
    console.print(f"[green]OK[/green] Configuration valid: {len(registry)} functions registered")


if __name__ == "__main__":
    app()
