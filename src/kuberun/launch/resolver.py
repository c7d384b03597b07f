"""Run-name resolution.

Turns the optional ``--name`` value into the authoritative run name: either
the validated, normalized user value or a fresh name minted by the history
store.
"""

from __future__ import annotations

from kuberun.core.errors import (
    DuplicateRunNameError,
    InvalidClusterNameError,
    MalformedRunNameError,
    MissingRunNameError,
    ReservedRunNameError,
)
from kuberun.core.logging import get_logger
from kuberun.core.protocols import HistoryStore
from kuberun.launch.naming import (
    RESERVED_RUN_NAMES,
    RUN_NAME_PATTERN,
    matches_cluster_name,
    matches_run_name,
    normalize_run_name,
)

logger = get_logger(__name__)


class RunNameResolver:
    """Validate a supplied run name or mint a new one.

    Parameters
    ----------
    history
        Store queried for existing names and asked to mint fresh ones.
    """

    def __init__(self, history: HistoryStore) -> None:
        self.history = history

    def resolve(self, supplied_name: str | None, cluster_bound: bool = True) -> str:
        """Return the run name to launch with.

        Raises
        ------
        InvalidClusterNameError
            Cluster-bound and the supplied name is not a valid pod name.
        ReservedRunNameError
            The supplied name is ``last``.
        MalformedRunNameError
            The supplied name fails the general run-name grammar.
        MissingRunNameError
            No name supplied and the history is disabled.
        DuplicateRunNameError
            The supplied name is already recorded in the history.
        """
        # The pod-name check runs on the raw value, before normalization and
        # before the general grammar: `My_Run` fails here although `my-run`
        # would pass.
        if cluster_bound and supplied_name and not matches_cluster_name(supplied_name):
            raise InvalidClusterNameError(supplied_name)

        if supplied_name in RESERVED_RUN_NAMES:
            raise ReservedRunNameError(supplied_name)
        if supplied_name and not matches_run_name(supplied_name):
            raise MalformedRunNameError(supplied_name, RUN_NAME_PATTERN.pattern)

        if not supplied_name:
            if not self.history.enabled:
                raise MissingRunNameError()
            name = self.history.generate_next_name()
            logger.debug("run_name.generated", run_name=name)
        elif self.history.enabled and self.history.exists(supplied_name):
            raise DuplicateRunNameError(supplied_name)
        else:
            name = supplied_name

        return normalize_run_name(name)
