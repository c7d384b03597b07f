"""
Shared pytest fixtures for kuberun tests.

This module provides:
- In-memory HistoryStore and Driver doubles
- Settings cache isolation
- A history file writer for FileHistoryStore tests

Usage:
    def test_something(history, driver):
        orchestrator = LaunchOrchestrator(driver, history)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from kuberun.core.settings import clear_settings_cache
from kuberun.launch.models import LaunchConfig


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Test doubles
# =============================================================================


class FakeHistoryStore:
    """In-memory HistoryStore with a scripted mint sequence."""

    def __init__(self, names=(), *, enabled=True, minted=("quirky_einstein",)):
        self.names = set(names)
        self._enabled = enabled
        self._minted = list(minted)
        self.mint_calls = 0
        self.exists_calls: list[str] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    def exists(self, name: str) -> bool:
        self.exists_calls.append(name)
        return name in self.names

    def generate_next_name(self) -> str:
        self.mint_calls += 1
        for name in self._minted:
            if name not in self.names:
                return name
        raise AssertionError("fake history ran out of names")


class FakeDriver:
    """Driver double recording every call."""

    def __init__(self, status: int = 0, error: Exception | None = None):
        self.status = status
        self.error = error
        self.calls: list[tuple[str, list[str], LaunchConfig]] = []
        self.shutdown_calls = 0

    @property
    def run_count(self) -> int:
        return len(self.calls)

    @property
    def last_config(self) -> LaunchConfig:
        return self.calls[-1][2]

    def run(self, pipeline, script_args, config):
        self.calls.append((pipeline, script_args, config))
        if self.error is not None:
            raise self.error

    def shutdown(self) -> int:
        self.shutdown_calls += 1
        return self.status


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def history() -> FakeHistoryStore:
    return FakeHistoryStore()


@pytest.fixture
def disabled_history() -> FakeHistoryStore:
    return FakeHistoryStore(enabled=False)


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def make_history():
    """Factory for FakeHistoryStore instances with custom contents."""
    return FakeHistoryStore


@pytest.fixture
def make_driver():
    """Factory for FakeDriver instances with a custom status or error."""
    return FakeDriver


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep KUBERUN_* env vars and the settings cache out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("KUBERUN_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def write_history(tmp_path):
    """Write a tab-separated history file and return its path."""

    def _write(*run_names: str, path: Path | None = None) -> Path:
        target = path or tmp_path / "history"
        lines = [
            "\t".join([
                "2024-05-01 10:00:00", "1m 2s", name, "OK",
                "a1b2c3d4e5", "5b0f7c2e-0000-4000-8000-000000000000", f"kuberun run org/repo --name {name}",
            ])
            for name in run_names
        ]
        target.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        return target

    return _write
