"""
yamlizer CLI.

Commands:
  • tokens: print the token stream the reader consumes
  • schema: print the schema derived from a Python type
  • load:   deserialize a file into a Python type and print the value

Types are named as ``module:qualname``, e.g. ``myapp.config:Settings``.
"""

import dataclasses
import importlib
import logging
import platform
from decimal import Decimal
from pathlib import Path
from typing import Any

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.pretty import Pretty
from rich.table import Table

from yamlizer._version import get_version
from yamlizer.core.classifier import schema_for
from yamlizer.core.deserialize import deserialize_file
from yamlizer.core.errors import DeserializeError, ScanError, SchemaError
from yamlizer.core.lexer import tokenize
from yamlizer.core.schema import describe
from yamlizer.core.settings import load_settings

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="yamlizer - read YAML documents straight into typed Python values",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"yamlizer {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def _configure_logging(verbose: bool, project_dir: Path) -> None:
    level = "DEBUG" if verbose else load_settings(project_dir).log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """yamlizer CLI main callback for global options."""
    _configure_logging(verbose, Path.cwd())


def import_type(reference: str) -> Any:
    """
    Import a type from a ``module:qualname`` reference.

    Raises:
        SchemaError: If the module or attribute cannot be found
    """
    module_name, sep, qualname = reference.partition(":")
    if not sep or not module_name or not qualname:
        raise SchemaError(f"Type reference '{reference}' must look like 'module:qualname'")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise SchemaError(f"Cannot import module '{module_name}': {e}") from e

    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise SchemaError(f"Module '{module_name}' has no attribute '{qualname}'") from e
    return target


def to_plain(value: Any) -> Any:
    """Convert a deserialized value into JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return {k: to_plain(v) for k, v in value._asdict().items()}
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    return value


@app.command("tokens")
def tokens_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML document"),
) -> None:
    """Print the token stream of a document."""
    try:
        tokens = tokenize(file.read_text(encoding="utf-8"), file)
    except ScanError as e:
        err_console.print(f"[red]Scan error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    table = Table(title=str(file))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("Value")
    table.add_column("Line:Col", justify="right", style="dim")
    for index, token in enumerate(tokens):
        value = "" if token.value is None else repr(token.value)
        location = f"{token.line}:{token.column}"
        table.add_row(str(index), token.kind.value, escape(value), location)
    console.print(table)


@app.command("schema")
def schema_command(
    type_ref: str = typer.Argument(..., help="Type as module:qualname"),
    as_json: bool = typer.Option(False, "--json", help="Print the full schema as JSON"),
) -> None:
    """Print the schema derived from a Python type."""
    try:
        schema = schema_for(import_type(type_ref))
    except SchemaError as e:
        err_console.print(f"[red]Schema error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(schema.model_dump_json())
    else:
        console.print(escape(describe(schema)))


@app.command("load")
def load_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML document"),
    type_ref: str = typer.Option(..., "--type", "-t", help="Target type as module:qualname"),
    as_json: bool = typer.Option(False, "--json", help="Print the value as JSON"),
    max_depth: int | None = typer.Option(
        None, "--max-depth", help="Deepest collection nesting accepted"
    ),
) -> None:
    """Deserialize a document into a Python type and print the value."""
    settings = load_settings(Path.cwd(), max_depth=max_depth)

    try:
        value = deserialize_file(import_type(type_ref), file, settings=settings)
    except SchemaError as e:
        err_console.print(f"[red]Schema error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except ScanError as e:
        err_console.print(f"[red]Scan error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except DeserializeError as e:
        err_console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(data=to_plain(value))
    else:
        console.print(Pretty(value))


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
