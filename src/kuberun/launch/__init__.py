"""
Run naming, validation and launch orchestration.

Related Modules:
    - :mod:`kuberun.launch.naming` - run-name and pod-name grammars
    - :mod:`kuberun.launch.resolver` - RunNameResolver
    - :mod:`kuberun.launch.images` - ImageResolver and deprecated options
    - :mod:`kuberun.launch.models` - LaunchOptions / LaunchConfig
    - :mod:`kuberun.launch.orchestrator` - LaunchOrchestrator
    - :mod:`kuberun.launch.history` - FileHistoryStore
    - :mod:`kuberun.launch.driver` - KubectlDriver

Example:
    >>> from kuberun.launch import matches_run_name, normalize_run_name
    >>> matches_run_name("happy_turing")
    True
    >>> normalize_run_name("happy_turing")
    'happy-turing'
"""

from __future__ import annotations

from kuberun.launch.driver import KubectlDriver
from kuberun.launch.history import FileHistoryStore, HistoryRecord
from kuberun.launch.images import DEPRECATED_OPTIONS, ImageResolver, resolve_deprecated
from kuberun.launch.models import LaunchConfig, LaunchOptions
from kuberun.launch.naming import (
    CLUSTER_NAME_PATTERN,
    RUN_NAME_PATTERN,
    matches_cluster_name,
    matches_run_name,
    normalize_run_name,
)
from kuberun.launch.orchestrator import LaunchOrchestrator, split_pipeline_args
from kuberun.launch.resolver import RunNameResolver

__all__ = [
    "CLUSTER_NAME_PATTERN",
    "DEPRECATED_OPTIONS",
    "FileHistoryStore",
    "HistoryRecord",
    "ImageResolver",
    "KubectlDriver",
    "LaunchConfig",
    "LaunchOptions",
    "LaunchOrchestrator",
    "RUN_NAME_PATTERN",
    "RunNameResolver",
    "matches_cluster_name",
    "matches_run_name",
    "normalize_run_name",
    "resolve_deprecated",
    "split_pipeline_args",
]
