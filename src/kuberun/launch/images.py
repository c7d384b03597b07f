"""Head image resolution and deprecated option aliasing.

Legacy options are declared once in :data:`DEPRECATED_OPTIONS`. A legacy
value always produces a warning when present; it only binds when the
current option is empty.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple

# legacy option -> current option
DEPRECATED_OPTIONS: dict[str, str] = {
    "pod_image": "head_image",
}


def _flag(option: str) -> str:
    return "--" + option.replace("_", "-")


def resolve_deprecated(
    values: Mapping[str, Any],
    table: Mapping[str, str] = DEPRECATED_OPTIONS,
) -> tuple[dict[str, Any], list[str]]:
    """Fold legacy option values into their current counterparts.

    Returns the resolved values (legacy keys removed) and the warnings to
    report.
    """
    resolved = {k: v for k, v in values.items() if k not in table}
    warnings: list[str] = []
    for legacy, current in table.items():
        legacy_value = values.get(legacy)
        if not legacy_value:
            continue
        warnings.append(f"{_flag(legacy)} is deprecated (use {_flag(current)} instead)")
        if not resolved.get(current):
            resolved[current] = legacy_value
    return resolved, warnings


class ImageResolution(NamedTuple):
    image: str | None
    warnings: list[str]


class ImageResolver:
    """Resolve the head pod image from ``--head-image`` and ``--pod-image``."""

    def resolve(self, head_image: str | None, pod_image: str | None = None) -> ImageResolution:
        resolved, warnings = resolve_deprecated({"head_image": head_image, "pod_image": pod_image})
        return ImageResolution(resolved.get("head_image") or None, warnings)
