from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Tuple

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import (
    EchoTreeObserver,
    render_remote_search,
    render_remote_table,
    render_search,
    render_table,
)
from datastore.errors import InvalidArgument
from datastore.observers import TreeObserver
from datastore.reading_tree import ReadingTree
from logging_config import configure_logging
from services.demo import demo_records, demo_search_days, demo_timestamp
from services.populator import build_readings, populate_tree, validate_request
from services.sensor import build_default_source
from services.timekeeping import parse_search_date
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Build, search and list a timestamp-ordered tree of temperature/humidity readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _parse_span(raw: str) -> Tuple[int, int, int]:
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 3:
        raise ValueError("Expected month,day,num_days.")
    try:
        month, day, num_days = (int(part) for part in parts)
    except ValueError as exc:
        raise ValueError("Expected month,day,num_days as integers.") from exc
    return month, day, num_days


def _resolve_timestamp(value: str, hour: int) -> int:
    candidate = value.strip()
    if candidate.isdigit():
        return int(candidate)
    return parse_search_date(candidate, hour=hour)


def _search_and_render(tree: ReadingTree, timestamp: int) -> None:
    try:
        node = tree.search(timestamp)
    except InvalidArgument as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        return
    render_search(timestamp, node.record if node else None)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Reading service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log tree operations to stderr.",
    ),
) -> None:
    """Entry point for the CLI."""
    if verbose:
        configure_logging("DEBUG")
    config = load_config(base_url=base_url)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("session")
def session_command(
    year: Optional[int] = typer.Option(None, "--year", help="Year of the generated readings."),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for the sensor and the insertion shuffle."
    ),
    trace: bool = typer.Option(
        True, "--trace/--no-trace", help="Print the nodes visited by each search."
    ),
) -> None:
    """Generate readings locally, answer date searches, then print the sorted table."""
    settings = get_settings()
    seed = seed if seed is not None else settings.shuffle_seed
    raw_span = typer.prompt(
        f"Enter the starting month (1 to 12),day (1 to 31), and number of days (1 to {settings.max_days})"
    )
    try:
        month, day, num_days = _parse_span(raw_span)
        request = validate_request(month, day, num_days, year=year)
    except ValueError as exc:
        typer.secho(f"Invalid input: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"User requested {request.num_days} data items starting at "
        f"{request.month:02d}/{request.day:02d}/{request.year}"
    )
    observer = EchoTreeObserver() if trace else TreeObserver()
    with ReadingTree.create(observer=observer) as tree:
        readings = build_readings(
            request.start,
            request.num_days,
            build_default_source(seed),
            hour=settings.reading_hour,
        )
        populate_tree(tree, readings, shuffle=random.Random(seed).shuffle)

        while True:
            raw_date = typer.prompt(
                "Enter a search date (mm/dd/yyyy)", default="", show_default=False
            )
            if not raw_date.strip():
                break
            try:
                timestamp = parse_search_date(raw_date, hour=settings.reading_hour)
            except ValueError as exc:
                typer.secho(str(exc), fg=typer.colors.RED, err=True)
                continue
            _search_and_render(tree, timestamp)

        render_table(tree.in_order(), tree.count)


@app.command("demo")
def demo_command(
    trace: bool = typer.Option(
        False, "--trace/--no-trace", help="Print the nodes visited by each search."
    ),
) -> None:
    """Load the fixed March 2024 readings, search March 1-14, and print the table."""
    observer = EchoTreeObserver() if trace else TreeObserver()
    with ReadingTree.create(observer=observer) as tree:
        for index, record in enumerate(demo_records()):
            tree.insert(record)
            typer.echo(f"Added data[{index}] to BST")

        typer.echo()
        typer.echo("Searching BST for all timestamps... plus a few others")
        for day in demo_search_days():
            _search_and_render(tree, demo_timestamp(day))

        render_table(tree.in_order(), tree.count)


@app.command("populate")
def populate_command(
    ctx: typer.Context,
    month: int = typer.Argument(..., help="Starting month (1 to 12)."),
    day: int = typer.Argument(..., help="Starting day (1 to 31)."),
    num_days: int = typer.Argument(..., help="Number of daily readings to generate."),
    year: Optional[int] = typer.Option(None, "--year", help="Year of the generated readings."),
) -> None:
    """Ask the service to generate and insert daily readings."""
    state = _get_state(ctx)
    payload = state.client.populate(month, day, num_days, year=year)
    typer.secho(
        f"Inserted {payload.get('inserted')} readings; tree now holds {payload.get('count')}.",
        fg=typer.colors.GREEN,
    )


@app.command("insert")
def insert_command(
    ctx: typer.Context,
    timestamp: int = typer.Argument(..., help="Seconds since the Unix epoch."),
    temperature: int = typer.Argument(..., help="Raw temperature register value."),
    humidity: int = typer.Argument(..., help="Raw humidity register value."),
) -> None:
    """Insert one reading into the service's tree."""
    state = _get_state(ctx)
    payload = state.client.insert_reading(timestamp, temperature, humidity)
    typer.echo(payload.get("display"))


@app.command("search")
def search_command(
    ctx: typer.Context,
    when: str = typer.Argument(..., help="Date as mm/dd/yyyy, or a raw timestamp."),
) -> None:
    """Look up the reading stored for a date."""
    state = _get_state(ctx)
    try:
        timestamp = _resolve_timestamp(when, get_settings().reading_hour)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    render_remote_search(state.client.search(timestamp))


@app.command("table")
def table_command(ctx: typer.Context) -> None:
    """Print every stored reading in ascending date order."""
    state = _get_state(ctx)
    render_remote_table(state.client.table())


@app.command("reset")
def reset_command(ctx: typer.Context) -> None:
    """Discard every reading held by the service."""
    state = _get_state(ctx)
    payload = state.client.reset()
    typer.echo(f"Released {payload.get('released')} readings.")
