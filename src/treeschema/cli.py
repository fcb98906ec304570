"""CLI interface for treeschema using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treeschema import __description__, __version__
from treeschema.config import LogLevel, OutputFormat, TreeSchemaConfig, load_config
from treeschema.errors import ErrorCollection, SchemaError
from treeschema.loader import load_json, load_schema, save_json
from treeschema.schema import generate_docs, generate_template, merge_schema, validate_schema
from treeschema.validator import DataValidator

app = typer.Typer(
    name="treeschema",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

SchemaArgument = Annotated[
    str,
    typer.Argument(help="Schema reference: path to a .json file or 'package.module:attribute'")
]
FormatOption = Annotated[
    Optional[OutputFormat],
    typer.Option("--format", "-f", help="Output format: table, json, text (default: from config)")
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Configuration file path (default: search for .treeschema.json)")
]


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"treeschema version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """treeschema - validate, transform and document nested data."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")


def _load_settings(config: Path | None) -> TreeSchemaConfig:
    settings = load_config(config)
    logging.basicConfig(
        level=LogLevel(settings.logging.level).to_logging(),
        format="%(name)s - %(levelname)s - %(message)s",
    )
    return settings


def _print_errors(errors: ErrorCollection, output_format: str, max_errors: int, subject: str) -> None:
    """Render an error collection in the requested format."""
    if output_format == OutputFormat.JSON.value:
        console.print(jsonlib.dumps(errors.to_dict(), indent=2), markup=False, highlight=False, soft_wrap=True)
        return

    if not errors:
        console.print(f"[green]{subject} is valid![/green]")
        return

    console.print(f"[red]{subject} has {errors.count} errors[/red]")
    shown = list(errors)[:max_errors]

    if output_format == OutputFormat.TEXT.value:
        for error in shown:
            console.print(str(error), markup=False, highlight=False, soft_wrap=True)
    else:
        table = Table()
        table.add_column("Path", style="cyan")
        table.add_column("Kind", style="yellow")
        table.add_column("Message", style="white")
        for error in shown:
            table.add_row(escape(error.location), error.kind.value, escape(error.message))
        console.print(table)

    if errors.count > max_errors:
        console.print(f"  ... and {errors.count - max_errors} more errors")


def _resolve_format(output_format: OutputFormat | None, settings: TreeSchemaConfig) -> str:
    if output_format is not None:
        return output_format.value
    return OutputFormat(settings.output.format).value


@app.command()
def check(
    schema: SchemaArgument,
    output_format: FormatOption = None,
    config: ConfigOption = None,
) -> None:
    """Check that a schema is well formed."""
    try:
        settings = _load_settings(config)
        errors = validate_schema(load_schema(schema))
        _print_errors(errors, _resolve_format(output_format, settings), settings.output.max_errors, "Schema")
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    raise typer.Exit(1 if errors else 0)


@app.command()
def validate(
    schema: SchemaArgument,
    data: Annotated[
        Path,
        typer.Argument(help="JSON data file to validate")
    ],
    write: Annotated[
        Optional[Path],
        typer.Option("--write", "-w", help="Write the transformed data to this file when valid")
    ] = None,
    output_format: FormatOption = None,
    config: ConfigOption = None,
) -> None:
    """Validate a JSON data file against a schema."""
    try:
        settings = _load_settings(config)
        output = _resolve_format(output_format, settings)
        validator = DataValidator(load_schema(schema), settings)
        document = load_json(data)
        errors = validator.validate(document)
        _print_errors(errors, output, settings.output.max_errors, "Data")

        if write is not None and not errors:
            save_json(write, document)
            if output != OutputFormat.JSON.value:
                console.print(f"[green]Wrote transformed data:[/green] {escape(str(write))}")
    except SchemaError as e:
        console.print("[red]Error:[/red] schema is not well formed")
        _print_errors(e.errors, OutputFormat.TEXT.value, settings.output.max_errors, "Schema")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    raise typer.Exit(1 if errors else 0)


@app.command()
def merge(
    base: SchemaArgument,
    incoming: Annotated[
        str,
        typer.Argument(help="Schema reference merged into the base schema")
    ],
    at: Annotated[
        str,
        typer.Option("--at", "-a", help="Dotted member path to merge under (default: root)")
    ] = "",
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Write the merged schema as JSON (callable-free schemas only)")
    ] = None,
    output_format: FormatOption = None,
    config: ConfigOption = None,
) -> None:
    """Merge one schema into another and report conflicts."""
    try:
        settings = _load_settings(config)
        output = _resolve_format(output_format, settings)
        base_schema = load_schema(base)
        errors = merge_schema(base_schema, load_schema(incoming), at, config=settings)
        _print_errors(errors, output, settings.output.max_errors, "Merged schema")

        if out is not None and not errors:
            save_json(out, base_schema)
            if output != OutputFormat.JSON.value:
                console.print(f"[green]Wrote merged schema:[/green] {escape(str(out))}")
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    raise typer.Exit(1 if errors else 0)


@app.command()
def template(
    schema: SchemaArgument,
    required_only: Annotated[
        bool,
        typer.Option("--required-only", help="Leave optional members out of the skeleton")
    ] = False,
    descriptions: Annotated[
        bool,
        typer.Option("--descriptions", help="Fill leaves with their descriptions")
    ] = False,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Write the skeleton to this file instead of stdout")
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Print a skeleton data instance for a schema."""
    try:
        _load_settings(config)
        skeleton = generate_template(
            load_schema(schema),
            include_optional=not required_only,
            use_descriptions=descriptions,
        )
        if out is not None:
            save_json(out, skeleton)
            console.print(f"[green]Wrote template:[/green] {escape(str(out))}")
        else:
            console.print(jsonlib.dumps(skeleton, indent=2), markup=False, highlight=False, soft_wrap=True)
    except SchemaError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def docs(
    schema: SchemaArgument,
    title: Annotated[
        str,
        typer.Option("--title", "-t", help="Document heading")
    ] = "Schema reference",
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Write Markdown to this file instead of stdout")
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Print Markdown documentation for a schema."""
    try:
        _load_settings(config)
        markdown = generate_docs(load_schema(schema), title=title)
        if out is not None:
            out.write_text(markdown, encoding="utf-8")
            console.print(f"[green]Wrote documentation:[/green] {escape(str(out))}")
        else:
            console.print(markdown, markup=False, highlight=False, soft_wrap=True)
    except SchemaError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
