"""
CLI utility helpers: consoles and collaborator wiring.
"""

from __future__ import annotations

import shlex
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from kuberun.core.errors import KuberunError
from kuberun.core.logging import get_logger
from kuberun.core.protocols import Driver
from kuberun.core.settings import KuberunSettings
from kuberun.launch.history import FileHistoryStore
from kuberun.launch.models import LaunchConfig

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def make_history(settings: KuberunSettings) -> FileHistoryStore:
    """Open the history store configured by ``settings``."""
    return FileHistoryStore(settings.history_file, disabled=settings.history_disabled)


class RecordingDriver:
    """Driver wrapper that appends each accepted run to the history file.

    The run is recorded once the wrapped driver has taken it (``run()``
    returned), with status ``OK``/``ERR`` from the exit code, or ``-`` when
    detached. Runs the driver rejected are not recorded.
    """

    def __init__(self, driver: Driver, history: FileHistoryStore) -> None:
        self.driver = driver
        self.history = history
        self._pending: tuple[str, str, bool] | None = None

    def run(self, pipeline: str, script_args: list[str], config: LaunchConfig) -> None:
        self.driver.run(pipeline, script_args, config)
        command = shlex.join(["kuberun", "run", pipeline, *script_args])
        self._pending = (config.run_name, command, config.background)

    def shutdown(self) -> int:
        status = self.driver.shutdown()
        if self._pending is not None:
            run_name, command, background = self._pending
            self._pending = None
            label = "-" if background else ("OK" if status == 0 else "ERR")
            try:
                self.history.record(run_name, command, status=label)
            except KuberunError as exc:
                # the run already happened; its exit status still wins
                logger.warning("history.record_failed", run_name=run_name, error=exc.message)
        return status


def abort(error: KuberunError) -> NoReturn:
    """Print ``error`` the way users expect and exit with status 1."""
    # messages may carry regex patterns that look like rich markup
    err_console.print(f"[bold red]ERROR[/bold red] ~ {escape(error.message)}", highlight=False)
    raise typer.Exit(code=1)
