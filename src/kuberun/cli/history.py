"""
CLI: ``kuberun history`` - list runs recorded in the history file.
"""

from __future__ import annotations

import json
from dataclasses import asdict

import typer
from rich.table import Table

from kuberun.cli.utils import abort, console, make_history
from kuberun.core.errors import KuberunError
from kuberun.core.settings import get_settings


def history(
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """List previously recorded runs."""
    store = make_history(get_settings())
    try:
        records = list(store.records())
    except KuberunError as exc:
        abort(exc)

    if json_out:
        typer.echo(json.dumps([asdict(r) for r in records], indent=2))
        return

    if not records:
        console.print("[dim]No runs recorded.[/dim]")
        return

    table = Table(title="Run History")
    table.add_column("Timestamp")
    table.add_column("Duration")
    table.add_column("Run name", style="bold cyan")
    table.add_column("Status")
    table.add_column("Session")
    table.add_column("Command", overflow="fold")
    for r in records:
        table.add_row(r.timestamp, r.duration, r.run_name, r.status, r.session_id, r.command)
    console.print(table)
