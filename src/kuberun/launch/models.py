"""Launch option and configuration models.

``LaunchOptions`` holds the raw values collected by the command line, some
of which overlap or are deprecated. ``LaunchConfig`` is the single
authoritative, immutable configuration built from them once the run name
and image have been resolved; it is what the driver receives.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LaunchOptions(BaseModel):
    """Raw launch options, as given on the command line.

    Example::

        options = LaunchOptions(
            run_name="nightly-qc",
            namespace="pipelines",
            volume_mounts=["shared-pvc:/workspace"],
        )
    """

    # Identity
    run_name: str | None = Field(default=None, description="Explicit run name (--name)")

    # Head pod
    head_image: str | None = Field(default=None, description="Head pod container image")
    pod_image: str | None = Field(default=None, description="Deprecated alias for head_image")
    head_cpus: int = Field(default=0, ge=0, description="CPUs requested for the head pod")
    head_memory: str | None = Field(default=None, description="Memory requested, e.g. '2Gi'")
    head_prescript: str | None = Field(
        default=None,
        description="Script sourced in the head pod before the pipeline starts",
    )

    # Cluster
    namespace: str | None = Field(default=None, description="Namespace for the head pod")
    volume_mounts: list[str] = Field(
        default_factory=list,
        description="Volume claim mounts as 'claim:path'",
    )
    remote_config: list[str] = Field(
        default_factory=list,
        description="Config files inside the cluster merged into the run",
    )
    remote_profile: str | None = Field(
        default=None,
        description="Profile selected among the remote config files",
    )

    # Execution
    background: bool = Field(default=False, description="Detach once the head pod is created")
    ansi_log: bool | None = Field(
        default=None,
        description="ANSI log flag; None when not given on the command line",
    )
    stdin: bool = Field(default=False, description="Read the pipeline script from stdin")

    @property
    def has_ansi_log_flag(self) -> bool:
        return self.ansi_log is not None


class LaunchConfig(BaseModel):
    """Authoritative, immutable launch configuration handed to the driver."""

    model_config = ConfigDict(frozen=True)

    run_name: str
    head_image: str | None = None
    head_cpus: int = 0
    head_memory: str | None = None
    head_prescript: str | None = None
    background: bool = False
    namespace: str | None = None
    volume_mounts: tuple[str, ...] = ()
    remote_config: tuple[str, ...] = ()
    remote_profile: str | None = None
