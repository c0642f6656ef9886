"""CLI interface for fluentval using Typer framework."""

import importlib
import inspect
import json as jsonlib
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Annotated, Any

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fluentval import __description__, __version__
from fluentval.config import FluentvalConfig, OutputFormat, load_config
from fluentval.errors import FluentvalError
from fluentval.results import ValidationFailure, failures_to_dict
from fluentval.validator import BaseValidator, FluentValidator

app = typer.Typer(
    name="fluentval",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"fluentval version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True,
                     help="Show version and exit")
    ] = False,
) -> None:
    """fluentval - fluent, rule-based validation for Python objects."""


def _setup_logging(config: FluentvalConfig) -> None:
    logging.basicConfig(
        level=config.logging.level.to_logging_level(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _accepts_config(validator_type: type) -> bool:
    try:
        parameters = inspect.signature(validator_type).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
        for parameter in parameters
    )


def load_target(target: str, config: FluentvalConfig | None = None) -> BaseValidator:
    """Import ``package.module:Name`` and return a validator instance.

    ``Name`` may be a validator class (instantiated with the configuration
    when it is a ``FluentValidator``) or an existing validator instance.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise typer.BadParameter(f"Target must look like 'package.module:Name', got '{target}'")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise typer.BadParameter(f"'{module_name}' has no attribute '{attr_path}'") from e

    if isinstance(obj, type) and issubclass(obj, BaseValidator):
        if config is not None and _accepts_config(obj):
            return obj(config)
        return obj()
    if isinstance(obj, BaseValidator):
        return obj

    raise typer.BadParameter(f"'{target}' is not a validator class or instance")


def load_records(data_path: Path) -> list[dict[str, Any]]:
    """Load records from a .json (object or array) or .jsonl file."""
    with open(data_path, encoding="utf-8") as f:
        if data_path.suffix == ".jsonl":
            records = [
                jsonlib.loads(line)
                for line in (raw.strip() for raw in f)
                if line and not line.startswith("#")
            ]
        else:
            data = jsonlib.load(f)
            records = data if isinstance(data, list) else [data]

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Record {index} is not a JSON object")
    return records


def build_subject(subject_type: type | None, record: dict[str, Any]) -> Any:
    """Turn a raw record into a subject without running any validation."""
    if subject_type is None:
        return SimpleNamespace(**record)
    if issubclass(subject_type, BaseModel):
        return subject_type.model_construct(**record)
    return subject_type(**record)


def _print_table(results: list[tuple[int, list[ValidationFailure]]]) -> None:
    failed = [(index, failures) for index, failures in results if failures]
    status_color = "green" if not failed else "red"
    status = "PASS" if not failed else "FAIL"
    console.print(f"[{status_color}]Validation Status: {status}[/{status_color}]")
    console.print(f"Records: {len(results)}, failed: {len(failed)}")

    if not failed:
        console.print("\n[green]No failures found![/green]")
        return

    table = Table()
    table.add_column("Record", style="cyan", justify="right")
    table.add_column("Property", style="white")
    table.add_column("Message", style="white")

    for index, failures in failed:
        for failure in failures:
            table.add_row(str(index), failure.property_name, failure.message)

    console.print(table)


def _report(results: list[tuple[int, list[ValidationFailure]]]) -> dict[str, Any]:
    return {
        "valid": all(not failures for _, failures in results),
        "records": [
            {"index": index, **failures_to_dict(failures)}
            for index, failures in results
        ],
    }


@app.command()
def check(
    target: Annotated[
        str,
        typer.Argument(help="Validator to use, as 'package.module:Name'")
    ],
    data: Annotated[
        Path,
        typer.Argument(help="JSON file (object or array) or JSONL file with records", exists=True,
                       dir_okay=False)
    ],
    format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: table, json (default: from config)")
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .fluentval.json)")
    ] = None,
) -> None:
    """Validate every record in a data file."""
    try:
        fluentval_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _setup_logging(fluentval_config)

    output_format = format or fluentval_config.output.format
    valid_formats = [f.value for f in OutputFormat]
    if output_format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{output_format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    validator = load_target(target, fluentval_config)

    try:
        records = load_records(data)
        results = [
            (index, validator.validate(build_subject(validator.subject_type, record)))
            for index, record in enumerate(records)
        ]
    except (ValueError, TypeError, AttributeError, FluentvalError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output_format == OutputFormat.JSON.value:
        console.print_json(jsonlib.dumps(_report(results)))
    else:
        _print_table(results)

    raise typer.Exit(0 if all(not failures for _, failures in results) else 1)


@app.command()
def rules(
    target: Annotated[
        str,
        typer.Argument(help="Validator to describe, as 'package.module:Name'")
    ],
) -> None:
    """List the rules a fluent validator is configured with."""
    validator = load_target(target)

    if not isinstance(validator, FluentValidator):
        console.print(f"[yellow]{type(validator).__name__} has no fluent rules to list[/yellow]")
        raise typer.Exit(0)

    entries = validator.describe()
    if not entries:
        console.print("[yellow]No rules configured[/yellow]")
        return

    table = Table(title=type(validator).__name__)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Property", style="cyan")
    table.add_column("Rule", style="white")
    table.add_column("Conditional", style="white")
    table.add_column("Message", style="dim")

    for position, entry in enumerate(entries, start=1):
        table.add_row(
            str(position),
            entry["property"],
            entry["kind"],
            "yes" if entry["conditional"] else "",
            entry["message"],
        )

    console.print(table)


if __name__ == "__main__":
    app()
