"""
Core primitives for kuberun: typed errors, structured logging, settings and
collaborator protocols.
"""

from kuberun.core.errors import (
    DriverError,
    DuplicateRunNameError,
    ErrorCategory,
    ErrorContext,
    HistoryError,
    InvalidClusterNameError,
    KubectlNotFoundError,
    KuberunError,
    LaunchAbortedError,
    MalformedRunNameError,
    MissingPipelineError,
    MissingRunNameError,
    ReservedRunNameError,
)
from kuberun.core.protocols import Driver, HistoryStore

__all__ = [
    "Driver",
    "DriverError",
    "DuplicateRunNameError",
    "ErrorCategory",
    "ErrorContext",
    "HistoryError",
    "HistoryStore",
    "InvalidClusterNameError",
    "KubectlNotFoundError",
    "KuberunError",
    "LaunchAbortedError",
    "MalformedRunNameError",
    "MissingPipelineError",
    "MissingRunNameError",
    "ReservedRunNameError",
]
