"""Launch orchestration.

Validates the launch, resolves the image and run name, builds the
:class:`LaunchConfig` and hands it to the driver. Every validation failure
is raised before the driver is touched; driver failures propagate as-is.

::

    launch(pipeline_ref, script_args, options)
      │
      ├── pipeline_ref missing ─────────────► MissingPipelineError
      ├── --ansi-log given ─────────────────► warning
      ├── ImageResolver.resolve() ──────────► deprecation warnings
      ├── RunNameResolver.resolve() ────────► naming errors
      ├── LaunchConfig(...)
      ├── driver.run(pipeline_ref, script_args, config)   (blocking)
      └── return driver.shutdown()
"""

from __future__ import annotations

from kuberun.core.errors import MissingPipelineError
from kuberun.core.logging import LogContext, get_logger
from kuberun.core.protocols import Driver, HistoryStore
from kuberun.launch.images import ImageResolver
from kuberun.launch.models import LaunchConfig, LaunchOptions
from kuberun.launch.resolver import RunNameResolver

logger = get_logger(__name__)

STDIN_PIPELINE = "-"


def split_pipeline_args(args: list[str] | None, stdin: bool = False) -> tuple[str | None, list[str]]:
    """Split positional arguments into the pipeline reference and script args.

    The pipeline is the first argument, or ``-`` when the script is read
    from standard input. Script args are everything after the first argument.
    """
    args = list(args or [])
    script_args = args[1:]
    if stdin:
        return STDIN_PIPELINE, script_args
    return (args[0] if args else None), script_args


class LaunchOrchestrator:
    """Coordinate one cluster launch.

    Parameters
    ----------
    driver
        Cluster driver that runs the pipeline.
    history
        Run history used to validate or mint the run name.
    """

    def __init__(
        self,
        driver: Driver,
        history: HistoryStore,
        image_resolver: ImageResolver | None = None,
    ) -> None:
        self.driver = driver
        self.names = RunNameResolver(history)
        self.images = image_resolver or ImageResolver()

    def launch(
        self,
        pipeline_ref: str | None,
        script_args: list[str],
        options: LaunchOptions,
    ) -> int:
        """Launch ``pipeline_ref`` and return the driver's exit status."""
        if not pipeline_ref:
            raise MissingPipelineError()

        if options.has_ansi_log_flag:
            logger.warning("Ansi logging not supported by kuberun command")

        image, warnings = self.images.resolve(options.head_image, options.pod_image)
        for message in warnings:
            logger.warning(message)

        run_name = self.names.resolve(options.run_name, cluster_bound=True)

        config = self.build_config(run_name, image, options)
        with LogContext(run_name=run_name, pipeline=pipeline_ref):
            logger.info("launch.started", namespace=config.namespace, background=config.background)
            self.driver.run(pipeline_ref, list(script_args), config)
            status = self.driver.shutdown()
            logger.info("launch.finished", status=status)
        return status

    @staticmethod
    def build_config(run_name: str, image: str | None, options: LaunchOptions) -> LaunchConfig:
        return LaunchConfig(
            run_name=run_name,
            head_image=image,
            head_cpus=options.head_cpus,
            head_memory=options.head_memory,
            head_prescript=options.head_prescript,
            background=options.background,
            namespace=options.namespace,
            volume_mounts=tuple(options.volume_mounts),
            remote_config=tuple(options.remote_config),
            remote_profile=options.remote_profile,
        )
