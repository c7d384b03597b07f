"""Run-name grammars.

Two independent grammars apply to a run that targets the cluster:

- the general run-name grammar (case-insensitive, underscores allowed);
- the cluster resource-name grammar (lowercase, hyphens and dots only),
  because the run name becomes the head pod's name.

A name can satisfy one and fail the other: ``my_run`` is a valid run name
but only a valid pod name once normalized to ``my-run``.
"""

from __future__ import annotations

import re

RUN_NAME_PATTERN = re.compile(r"[a-z](?:[a-z\d]|[-_](?=[a-z\d])){0,79}", re.IGNORECASE)

_SEGMENT = r"[a-z0-9]+(?:-[a-z0-9]+)*"
CLUSTER_NAME_PATTERN = re.compile(rf"{_SEGMENT}(?:\.{_SEGMENT})*")

RESERVED_RUN_NAMES = frozenset({"last"})


def matches_run_name(name: str) -> bool:
    """Whether ``name`` matches the general run-name grammar."""
    return RUN_NAME_PATTERN.fullmatch(name) is not None


def matches_cluster_name(name: str) -> bool:
    """Whether ``name`` is usable verbatim as a cluster resource name."""
    return CLUSTER_NAME_PATTERN.fullmatch(name) is not None


def normalize_run_name(name: str) -> str:
    """Map underscores to hyphens so a valid run name is also a valid pod name."""
    return name.replace("_", "-")
