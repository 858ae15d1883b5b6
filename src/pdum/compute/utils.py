"""Common utilities for pdum_compute commands."""

from __future__ import annotations

import json
from typing import Iterable, Optional

from InquirerPy import inquirer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pdum.compute.types import Compute, Operation

console = Console()


async def choose_zone(compute: Compute) -> str:
    """Interactively choose a zone of the project.

    Returns:
        The selected zone name

    Raises:
        ValueError: If the project reports no zones
    """
    zones = await compute.zones(filter='status = "UP"')
    names = sorted(z["name"] for z in zones)

    if not names:
        raise ValueError(f"No zones available in project {compute.project}")

    # If only one zone, auto-select it
    if len(names) == 1:
        console.print(f"[cyan]Using only available zone:[/cyan] {names[0]}")
        return names[0]

    return await inquirer.fuzzy(
        message="Select zone:",
        choices=names,
    ).execute_async()


async def wait_with_spinner(operation: Operation, *, timeout: Optional[float], description: str) -> dict:
    """Wait for ``operation`` while showing a spinner."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(description=description, total=None)
        return await operation.wait(timeout=timeout)


def print_metadata(metadata: dict) -> None:
    """Pretty-print a resource representation as JSON."""
    console.print_json(json.dumps(metadata))


def resources_table(title: str, rows: Iterable[tuple[str, ...]], columns: tuple[str, ...]) -> Table:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    return table
