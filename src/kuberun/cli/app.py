"""
Root Typer application for the kuberun CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from kuberun.cli.history import history
from kuberun.cli.run import run

app = Typer(
    name="kuberun",
    help="kuberun - execute pipelines in a Kubernetes cluster.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from kuberun import __version__

        typer.echo(f"kuberun {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """kuberun CLI - launch runs and inspect the run history."""


app.command(
    "run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(run)
app.command("history")(history)
