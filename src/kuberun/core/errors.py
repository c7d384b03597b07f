"""
Structured error types for kuberun.

Every failure raised by kuberun carries a category and optional context so
the CLI can print an actionable message and log a structured event.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       KuberunError                               │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  LaunchAbortedError (VALIDATION)                                 │
        │       │                                                          │
        │  MissingPipelineError      InvalidClusterNameError               │
        │  ReservedRunNameError      MalformedRunNameError                 │
        │  DuplicateRunNameError     MissingRunNameError                   │
        │                                                                  │
        │  HistoryError (STORAGE)    DriverError (RUNTIME)                 │
        │                                 │                                │
        │                            KubectlNotFoundError                  │
        └─────────────────────────────────────────────────────────────────┘

    ``LaunchAbortedError`` subclasses are raised before anything is sent to
    the cluster. ``DriverError`` is raised by the bundled driver while the
    launch is in flight and is never caught by the orchestrator.

Examples:
    >>> error = DuplicateRunNameError("happy-turing")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.context.run_name
    'happy-turing'

Tags:
    error-handling, exception-hierarchy, error-context, kuberun
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    VALIDATION = "VALIDATION"     # Bad user input, caught before launch
    CONFIG = "CONFIG"             # Missing or invalid settings
    STORAGE = "STORAGE"           # History file problems
    RUNTIME = "RUNTIME"           # Cluster driver failures
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error for logging."""

    run_name: str | None = None
    pipeline: str | None = None
    namespace: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["run_name", "pipeline", "namespace"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class KuberunError(Exception):
    """
    Base exception for all kuberun errors.

    Subclasses set ``default_category`` to classify themselves; callers may
    override it per instance.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> KuberunError:
        """
        Add context to this error (fluent API).

        Usage:
            raise DriverError("apply failed").with_context(namespace="ci")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# LAUNCH VALIDATION ERRORS (fatal, raised before the driver is called)
# =============================================================================


class LaunchAbortedError(KuberunError):
    """A launch precondition failed; nothing was sent to the cluster."""

    default_category = ErrorCategory.VALIDATION


class MissingPipelineError(LaunchAbortedError):
    """No pipeline reference could be determined from the arguments."""

    def __init__(self, message: str = "No project name was specified"):
        super().__init__(message)


class InvalidClusterNameError(LaunchAbortedError):
    """Run name is not usable as a cluster resource (pod) name."""

    def __init__(self, name: str):
        super().__init__(
            "Not a valid K8s pod name -- It can only contain lower case alphanumeric "
            "characters, '-' or '.', and must start and end with an alphanumeric character",
            context=ErrorContext(run_name=name),
        )


class ReservedRunNameError(LaunchAbortedError):
    """Run name is the reserved literal ``last``."""

    def __init__(self, name: str):
        super().__init__(f"Not a valid run name: `{name}`", context=ErrorContext(run_name=name))


class MalformedRunNameError(LaunchAbortedError):
    """Run name does not match the general run-name grammar."""

    def __init__(self, name: str, pattern: str):
        self.pattern = pattern
        super().__init__(
            f"Not a valid run name: `{name}` -- It must match the pattern {pattern}",
            context=ErrorContext(run_name=name),
        )


class DuplicateRunNameError(LaunchAbortedError):
    """Run name is already recorded in the history."""

    def __init__(self, name: str):
        super().__init__(
            f"Run name `{name}` has been already used -- Specify a different one",
            context=ErrorContext(run_name=name),
        )


class MissingRunNameError(LaunchAbortedError):
    """No run name was given and history is disabled, so none can be generated."""

    def __init__(self, message: str = "Missing workflow run name"):
        super().__init__(message)


# =============================================================================
# COLLABORATOR ERRORS
# =============================================================================


class HistoryError(KuberunError):
    """The run history could not be read or a name could not be minted."""

    default_category = ErrorCategory.STORAGE


class DriverError(KuberunError):
    """The cluster driver failed while launching or supervising a run."""

    default_category = ErrorCategory.RUNTIME


class KubectlNotFoundError(DriverError):
    """Raised when the kubectl CLI is not available."""


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "KuberunError",
    # Launch validation
    "LaunchAbortedError",
    "MissingPipelineError",
    "InvalidClusterNameError",
    "ReservedRunNameError",
    "MalformedRunNameError",
    "DuplicateRunNameError",
    "MissingRunNameError",
    # Collaborators
    "HistoryError",
    "DriverError",
    "KubectlNotFoundError",
]
