"""Tests for ``kuberun history``."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from kuberun.cli import app

runner = CliRunner()


class TestHistoryCommand:
    def test_empty(self):
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "No runs recorded." in result.output

    def test_table(self, monkeypatch, write_history):
        monkeypatch.setenv("KUBERUN_HISTORY_FILE", str(write_history("happy_turing")))
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "Run History" in result.output

    def test_json(self, monkeypatch, write_history):
        monkeypatch.setenv("KUBERUN_HISTORY_FILE", str(write_history("happy_turing", "qc-run")))
        result = runner.invoke(app, ["history", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r["run_name"] for r in data] == ["happy_turing", "qc-run"]
        assert data[0]["status"] == "OK"

    def test_json_empty(self):
        result = runner.invoke(app, ["history", "--json"])
        assert json.loads(result.output) == []

    def test_unreadable_history(self, monkeypatch, tmp_path):
        directory = tmp_path / "history-dir"
        directory.mkdir()
        monkeypatch.setenv("KUBERUN_HISTORY_FILE", str(directory))
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 1
        assert "Unable to read history file" in result.output

    def test_undecodable_history(self, monkeypatch, tmp_path):
        path = tmp_path / "bad-history"
        path.write_bytes(b"\xff\xfe garbage\n")
        monkeypatch.setenv("KUBERUN_HISTORY_FILE", str(path))
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 1
        assert "Unable to read history file" in result.output
