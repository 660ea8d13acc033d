from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

from datastore.observers import TreeObserver
from datastore.reading_tree import Node
from models.records import Record
from services.display import format_day, format_moment, format_record_line, format_search_hit, format_trace_step

TABLE_TITLE = "Temperature/Humidity table:"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)
    typer.echo("-" * len(text))


def render_table(records: Iterable[Record], count: int) -> None:
    typer.echo()
    echo_heading(TABLE_TITLE)
    typer.echo(f"There are {count} nodes in the BST.")
    for record in records:
        typer.echo(format_record_line(record))


def render_search(timestamp: int, record: Record | None) -> None:
    day = format_day(timestamp)
    if record is None:
        typer.echo(f"Did not find data for Timestamp {day}")
        return
    typer.secho(f"Found data for Timestamp {day}", fg=typer.colors.GREEN)
    typer.echo(format_search_hit(record))


def record_from_payload(payload: Dict[str, Any]) -> Record:
    return Record(
        timestamp=payload["timestamp"],
        temperature=payload["temperature"],
        humidity=payload["humidity"],
    )


def render_remote_search(payload: Dict[str, Any]) -> None:
    path = payload.get("path") or []
    if path:
        typer.echo("Visiting these nodes:")
        for step in path:
            typer.echo(format_trace_step(record_from_payload(step)))
    reading = payload.get("reading")
    render_search(payload["timestamp"], record_from_payload(reading) if reading else None)


def render_remote_table(payload: Dict[str, Any]) -> None:
    records = [record_from_payload(item) for item in payload.get("readings") or []]
    render_table(records, payload.get("count", len(records)))
    typer.echo(f"Tree height: {payload.get('height')}")


class EchoTreeObserver(TreeObserver):
    """Print the search descent the way the interactive session shows it."""

    def on_search_start(self, timestamp: int) -> None:
        typer.echo(f"Starting search for timestamp {timestamp}. Visiting these nodes:")

    def on_visit(self, node: Node) -> None:
        typer.echo(format_trace_step(node.record))

    def on_found(self, node: Node) -> None:
        typer.echo(f"FOUND -> {format_moment(node.timestamp)}")
