"""CLI entry point for keyed_batcher."""

from __future__ import annotations

import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

import typer
from rich.table import Table

from keyed_batcher import __version__
from keyed_batcher.batching import KeyedBatchedAccumulator
from keyed_batcher.cli_services import (
    EXIT_ERROR,
    EXIT_INVALID_ARG,
    RecordError,
    _escape_rich,
    accumulate_records,
    console,
    error_console,
)
from keyed_batcher.config import KeyedBatcherConfig, get_config
from keyed_batcher.exceptions import ConfigError, InvalidArgumentError

app = typer.Typer(
    name="kbatch",
    help="Group JSON-lines records into fixed-size batches per key",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

_OUTPUT_FORMATS = ("json", "jsonl")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"kbatch {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Per-key fixed-size batching of JSON-lines records."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def _load_config(batch_size: int | None) -> KeyedBatcherConfig:
    try:
        config = get_config(batch_size=batch_size)
    except ConfigError as e:
        error_console.print(f"[red]Error:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_INVALID_ARG)
    if config.verbose:
        logging.basicConfig(level=logging.DEBUG)
    return config


def _read_lines(input_path: str) -> list[str]:
    """Read input lines from a file path, or stdin when given '-'."""
    try:
        if input_path == "-":
            return sys.stdin.read().splitlines()
        return Path(input_path).read_text().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        error_console.print(
            f"[red]Error reading {_escape_rich(input_path)}:[/red] {_escape_rich(str(e))}"
        )
        raise typer.Exit(code=EXIT_ERROR)


def _accumulate(
    input_path: str,
    key_field: str | None,
    batch_size: int | None,
) -> KeyedBatchedAccumulator[dict[str, Any]]:
    if key_field is not None and not key_field:
        error_console.print("[red]Error:[/red] --key-field must not be empty")
        raise typer.Exit(code=EXIT_INVALID_ARG)
    config = _load_config(batch_size)
    lines = _read_lines(input_path)
    try:
        return accumulate_records(
            lines,
            key_field=key_field if key_field is not None else config.key_field,
            batch_size=config.batch_size,
        )
    except (RecordError, InvalidArgumentError) as e:
        error_console.print(f"[red]Error:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_INVALID_ARG)


def _serialize(key_to_batches: dict[str, list[list[Any]]], output_format: str) -> str:
    if output_format == "jsonl":
        return "\n".join(
            json.dumps({"key": key, "batch_index": index, "items": batch})
            for key, batches in key_to_batches.items()
            for index, batch in enumerate(batches)
        )
    return json.dumps(key_to_batches, indent=2)


@app.command()
def batch(
    input_path: str = typer.Argument(
        ...,
        metavar="INPUT",
        help="JSON-lines file to read, or '-' for stdin",
    ),
    key_field: str = typer.Option(
        None,
        "--key-field",
        "-k",
        help="Record field holding the partition key (default: from config)",
    ),
    batch_size: int = typer.Option(
        None,
        "--batch-size",
        "-b",
        help="Items per batch (default: from config)",
    ),
    output: str = typer.Option(
        "-",
        "--output",
        "-o",
        help="Output file path, or '-' for stdout",
    ),
    format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Output format: json (key to batches) or jsonl (one batch per line)",
    ),
) -> None:
    """Batch records per key and write the extracted batches."""
    if format not in _OUTPUT_FORMATS:
        error_console.print(
            f"[red]Error:[/red] --format must be one of {', '.join(_OUTPUT_FORMATS)}"
        )
        raise typer.Exit(code=EXIT_INVALID_ARG)

    accumulator = _accumulate(input_path, key_field, batch_size)
    total_items = accumulator.total_accumulated_items_count
    output_data = _serialize(accumulator.extract_all(), format)

    if output == "-":
        # Use built-in print to avoid Rich markup interpretation
        print(output_data)
        return
    try:
        Path(output).write_text(output_data)
    except OSError as e:
        error_console.print(f"[red]Error writing to file:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_ERROR)
    console.print(f"[green]Wrote {total_items} records to {_escape_rich(output)}[/green]")


@app.command()
def stats(
    input_path: str = typer.Argument(
        ...,
        metavar="INPUT",
        help="JSON-lines file to read, or '-' for stdin",
    ),
    key_field: str = typer.Option(
        None,
        "--key-field",
        "-k",
        help="Record field holding the partition key (default: from config)",
    ),
    batch_size: int = typer.Option(
        None,
        "--batch-size",
        "-b",
        help="Items per batch (default: from config)",
    ),
) -> None:
    """Show per-key item and batch counts without writing batches."""
    accumulator = _accumulate(input_path, key_field, batch_size)
    status = accumulator.status()

    if status.is_empty:
        console.print("[yellow]No records found[/yellow]")
        return

    table = Table(title=f"Batch size {status.batch_size}")
    table.add_column("Key")
    table.add_column("Items", justify="right")
    table.add_column("Batches", justify="right")
    total_batches = 0
    for key, count in status.item_counts.items():
        batches = math.ceil(count / status.batch_size)
        total_batches += batches
        table.add_row(_escape_rich(key), str(count), str(batches))
    console.print(table)
    console.print(
        f"[bold]Total:[/bold] {status.total_items} items, "
        f"{total_batches} batches, {status.active_keys_count} keys"
    )


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
