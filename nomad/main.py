from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from nomad.config import get_settings
from nomad.errors import NomadError
from nomad.formatters.abstract import RecordFormatter
from nomad.formatters.registry import available_formats, resolve_formatter
from nomad.reporter import print_record
from nomad.schema_file import load_schema_file
from nomad.utils.logging import configure_logging

app = typer.Typer(help="Convert typed records between wire formats.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"time_zone={settings.time_zone} | log_level={settings.log_level} "
        f"json_logs={settings.json_logs}"
    )


@app.command()
def formats() -> None:
    """
    List the wire formats.
    """
    for name in available_formats():
        formatter = resolve_formatter(name)
        suffix = "" if formatter.textual else " (not available on the command line)"
        typer.echo(f"{name}: {formatter.description}{suffix}")


def _text_formatter(name: str) -> RecordFormatter:
    formatter = resolve_formatter(name)
    if not formatter.textual:
        raise ValueError(f"Format '{name}' has no text form")
    return formatter


def _read_input(input_text: Optional[str]) -> str:
    if input_text is not None:
        return input_text
    return sys.stdin.read()


@app.command()
def convert(
    schema: Path = typer.Argument(..., help="JSON schema file describing the record type."),
    source: str = typer.Option("query", "--from", "-f", help="Format of the input (query, json)."),
    target: str = typer.Option("json", "--to", "-t", help="Format to write (query, json)."),
    input_text: Optional[str] = typer.Option(
        None,
        "--input",
        "-i",
        help="Serialized record. Read from stdin when omitted.",
    ),
) -> None:
    """
    Read a record in one wire format and print it in another.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    try:
        record_cls = load_schema_file(schema)
        reader = _text_formatter(source)
        writer = _text_formatter(target)
        record = reader.load(record_cls, _read_input(input_text))
        typer.echo(writer.dump(record))
    except (NomadError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def show(
    schema: Path = typer.Argument(..., help="JSON schema file describing the record type."),
    source: str = typer.Option("query", "--from", "-f", help="Format of the input (query, json)."),
    input_text: Optional[str] = typer.Option(
        None,
        "--input",
        "-i",
        help="Serialized record. Read from stdin when omitted.",
    ),
) -> None:
    """
    Decode a record and render it as a table.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    try:
        record_cls = load_schema_file(schema)
        record = _text_formatter(source).load(record_cls, _read_input(input_text))
    except (NomadError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    print_record(record)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
