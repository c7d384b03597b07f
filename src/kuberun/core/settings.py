"""
Centralized settings for kuberun.

All fields can be set through ``KUBERUN_*`` environment variables (e.g.
``KUBERUN_HISTORY_DISABLED=true``) or a ``.env`` file in the working
directory. Command-line options override these values per invocation.

Tags:
    kuberun, configuration, settings, pydantic
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KuberunSettings(BaseSettings):
    """kuberun configuration resolved from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="KUBERUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── History ──────────────────────────────────────────────────
    history_file: Path = Field(
        default=Path(".kuberun/history"),
        description="Tab-separated run history used for name uniqueness",
    )
    history_disabled: bool = Field(
        default=False,
        description="Disable the run history; an explicit --name becomes mandatory",
    )

    # ── Cluster ──────────────────────────────────────────────────
    kubectl: str = Field(default="kubectl", description="kubectl binary name or path")
    namespace: str | None = Field(default=None, description="Default namespace for the head pod")
    default_head_image: str = Field(
        default="nextflow/nextflow:latest",
        description="Head pod image used when neither --head-image nor --pod-image is given",
    )
    launch_command: str = Field(
        default="nextflow",
        description="Pipeline engine executable started inside the head pod",
    )
    startup_timeout_seconds: int = Field(
        default=600,
        description="How long to wait for the head pod to leave the Pending phase",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console", "auto"] = Field(default="auto")

    @property
    def json_logs(self) -> bool | None:
        """Map ``log_format`` to the ``json_format`` flag of configure_logging."""
        if self.log_format == "auto":
            return None
        return self.log_format == "json"


_settings_cache: dict[str, KuberunSettings] = {}


def get_settings(*, _force_reload: bool = False) -> KuberunSettings:
    """Load, validate, and cache a :class:`KuberunSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = KuberunSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
