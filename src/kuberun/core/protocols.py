"""
Structural protocols for the collaborators of the launch core.

The orchestrator never imports a concrete history store or driver; it
receives objects matching these shapes. The bundled implementations are
:class:`kuberun.launch.history.FileHistoryStore` and
:class:`kuberun.launch.driver.KubectlDriver`; tests pass in-memory doubles.

Architecture:
    ::

        protocols.py
        ├── HistoryStore  - existence check + fresh name minting
        └── Driver        - blocking run() followed by shutdown() -> status
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kuberun.launch.models import LaunchConfig


@runtime_checkable
class HistoryStore(Protocol):
    """Persisted record of past run names.

    The launch core only reads it. Minting must return a name that is not
    yet recorded at the time of the call.
    """

    @property
    def enabled(self) -> bool:
        """False when no history is available (names cannot be generated)."""
        ...

    def exists(self, name: str) -> bool:
        """Whether ``name`` is already recorded."""
        ...

    def generate_next_name(self) -> str:
        """Mint a fresh, not-yet-used run name."""
        ...


@runtime_checkable
class Driver(Protocol):
    """Provisions and supervises the cluster-side run."""

    def run(self, pipeline: str, script_args: list[str], config: LaunchConfig) -> None:
        """Start the run. Blocks until it completes unless ``config.background``."""
        ...

    def shutdown(self) -> int:
        """Finalize the run and return its exit status."""
        ...


__all__ = ["HistoryStore", "Driver"]
