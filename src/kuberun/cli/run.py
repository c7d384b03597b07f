"""
CLI: ``kuberun run`` - execute a pipeline in a Kubernetes cluster.

Usage::

    kuberun run org/repo                              # generated run name
    kuberun run org/repo --name nightly-qc -n ci      # explicit name, namespace
    kuberun run org/repo -v shared-pvc:/workspace     # mount a volume claim
    kuberun run --stdin < main.nf                     # script from stdin
    kuberun run org/repo --bg                         # detach once the pod exists

Anything after the pipeline is forwarded to the pipeline as script args.
The process exits with the head pod's exit code. Accepted runs are appended
to the history file so their names cannot be reused.
"""

from __future__ import annotations

import typer

from kuberun.cli.utils import RecordingDriver, abort, make_history
from kuberun.core.errors import KuberunError
from kuberun.core.logging import configure_logging
from kuberun.core.settings import get_settings
from kuberun.launch.driver import KubectlDriver
from kuberun.launch.models import LaunchOptions
from kuberun.launch.orchestrator import LaunchOrchestrator, split_pipeline_args


def run(
    args: list[str] | None = typer.Argument(
        None,
        metavar="[PIPELINE] [SCRIPT_ARGS]...",
        help="Pipeline to run followed by arguments passed to the pipeline script.",
    ),
    name: str | None = typer.Option(None, "--name", help="Assign a mnemonic name to the run."),
    volume_mount: list[str] = typer.Option(
        [], "--volume-mount", "-v",
        help="Volume claim mount, e.g. my-pvc:/mnt/path. Repeatable.",
    ),
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="K8s namespace to use."),
    head_image: str | None = typer.Option(
        None, "--head-image", help="Container image for the driver pod.",
    ),
    pod_image: str | None = typer.Option(
        None, "--pod-image", help="Alias for --head-image (deprecated).",
    ),
    head_cpus: int = typer.Option(0, "--head-cpus", min=0, help="CPUs requested for the driver pod."),
    head_memory: str | None = typer.Option(
        None, "--head-memory", help="Memory requested for the driver pod, e.g. 2Gi.",
    ),
    head_prescript: str | None = typer.Option(
        None, "--head-prescript", help="Script to run before the pipeline starts.",
    ),
    remote_config: list[str] = typer.Option(
        [], "--remote-config", hidden=True,
        help="Config file from the cluster to add to the configuration set.",
    ),
    remote_profile: str | None = typer.Option(
        None, "--remote-profile", help="Configuration profile to select in the remote config.",
    ),
    background: bool = typer.Option(False, "--bg", help="Detach once the driver pod is created."),
    ansi_log: bool | None = typer.Option(
        None, "--ansi-log/--no-ansi-log", help="Not supported by kuberun; accepted for compatibility.",
    ),
    stdin: bool = typer.Option(False, "--stdin", help="Read the pipeline script from standard input."),
) -> None:
    """Execute a pipeline in a Kubernetes cluster."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)

    options = LaunchOptions(
        run_name=name,
        head_image=head_image,
        pod_image=pod_image,
        head_cpus=head_cpus,
        head_memory=head_memory,
        head_prescript=head_prescript,
        namespace=namespace,
        volume_mounts=volume_mount,
        remote_config=remote_config,
        remote_profile=remote_profile,
        background=background,
        ansi_log=ansi_log,
        stdin=stdin,
    )
    pipeline, script_args = split_pipeline_args(args, stdin=options.stdin)

    driver = KubectlDriver(
        settings.kubectl,
        default_image=settings.default_head_image,
        launch_command=settings.launch_command,
        default_namespace=settings.namespace,
        startup_timeout=settings.startup_timeout_seconds,
    )
    history = make_history(settings)
    orchestrator = LaunchOrchestrator(RecordingDriver(driver, history), history)

    try:
        status = orchestrator.launch(pipeline, script_args, options)
    except KuberunError as exc:
        abort(exc)
    raise typer.Exit(code=status)
