"""Tests for FileHistoryStore and the run name generator."""

from __future__ import annotations

import random
from unittest.mock import patch

import pytest

from kuberun.core.errors import HistoryError
from kuberun.core.protocols import HistoryStore
from kuberun.launch import history as history_mod
from kuberun.launch.history import FileHistoryStore, HistoryRecord, random_run_name
from kuberun.launch.naming import matches_cluster_name, matches_run_name, normalize_run_name
from kuberun.launch.resolver import RunNameResolver


class TestHistoryRecord:
    def test_parse(self):
        line = "2024-05-01 10:00:00\t1m\thappy_turing\tOK\tabc\tsess-1\tkuberun run org/repo\n"
        record = HistoryRecord.parse(line)
        assert record.run_name == "happy_turing"
        assert record.status == "OK"
        assert record.command == "kuberun run org/repo"

    def test_short_line_is_skipped(self):
        assert HistoryRecord.parse("just\tthree\tcols") is None
        assert HistoryRecord.parse("\n") is None

    def test_tabs_in_command_are_kept(self):
        record = HistoryRecord.parse("t\td\tn\tOK\tr\ts\ta\tb")
        assert record.command == "a\tb"


class TestFileHistoryStore:
    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(FileHistoryStore(tmp_path / "history"), HistoryStore)

    def test_missing_file_is_empty(self, tmp_path):
        store = FileHistoryStore(tmp_path / "nope" / "history")
        assert list(store.records()) == []
        assert not store.exists("happy-turing")

    def test_exists(self, write_history):
        store = FileHistoryStore(write_history("happy_turing", "sharp-curie"))
        assert store.exists("happy_turing")
        assert store.exists("sharp-curie")
        assert not store.exists("sharp-turing")

    def test_exists_compares_pod_name_form(self, write_history):
        store = FileHistoryStore(write_history("happy_turing", "sharp-curie"))
        assert store.exists("happy-turing")
        assert store.exists("sharp_curie")

    def test_malformed_lines_skipped(self, tmp_path):
        path = tmp_path / "history"
        path.write_text("garbage\n\nt\td\tok_run\tOK\tr\ts\tcmd\n", encoding="utf-8")
        assert [r.run_name for r in FileHistoryStore(path).records()] == ["ok_run"]

    def test_enabled_flag(self, tmp_path):
        assert FileHistoryStore(tmp_path / "h").enabled
        assert not FileHistoryStore(tmp_path / "h", disabled=True).enabled

    def test_disabled_store_cannot_mint(self, tmp_path):
        with pytest.raises(HistoryError):
            FileHistoryStore(tmp_path / "h", disabled=True).generate_next_name()

    def test_unreadable_file(self, tmp_path):
        directory = tmp_path / "history"
        directory.mkdir()
        with pytest.raises(HistoryError, match="Unable to read history file"):
            FileHistoryStore(directory).exists("x")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "history"
        path.write_bytes(b"\xff\xfe garbage\n")
        with pytest.raises(HistoryError, match="Unable to read history file"):
            FileHistoryStore(path).exists("x")


class TestGenerateNextName:
    def test_generated_names_are_valid(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history", rng=random.Random(7))
        for _ in range(50):
            name = store.generate_next_name()
            assert matches_run_name(name)
            assert matches_cluster_name(normalize_run_name(name))

    def test_skips_used_names(self, write_history):
        first = random_run_name(random.Random(1))
        store = FileHistoryStore(write_history(first), rng=random.Random(1))
        name = store.generate_next_name()
        assert name != first
        assert not store.exists(name)

    def test_suffix_after_exhausting_attempts(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history")
        with patch.object(history_mod, "random_run_name", return_value="happy_turing"), \
                patch.object(store, "names", return_value={"happy-turing"}):
            name = store.generate_next_name()
        assert name.startswith("happy_turing_")
        assert matches_run_name(name)

    def test_skips_names_recorded_in_pod_name_form(self, write_history):
        first = random_run_name(random.Random(7))
        store = FileHistoryStore(write_history(normalize_run_name(first)), rng=random.Random(7))
        name = RunNameResolver(store).resolve(None, cluster_bound=True)
        assert name != normalize_run_name(first)
        assert not store.exists(name)


class TestRecord:
    def test_appends_line(self, tmp_path):
        path = tmp_path / ".kuberun" / "history"
        store = FileHistoryStore(path)
        entry = store.record("nightly-qc", "kuberun run org/repo", status="OK", session_id="s-1")

        assert path.exists()
        [record] = list(store.records())
        assert record == entry
        assert record.run_name == "nightly-qc"
        assert record.status == "OK"
        assert record.session_id == "s-1"
        assert record.command == "kuberun run org/repo"
        assert store.exists("nightly-qc")

    def test_appends_after_existing_runs(self, write_history):
        store = FileHistoryStore(write_history("happy_turing"))
        store.record("sharp-curie", "kuberun run org/repo")
        assert [r.run_name for r in store.records()] == ["happy_turing", "sharp-curie"]

    def test_tabs_in_command_do_not_shift_columns(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history")
        store.record("r", "kuberun run org/repo --sep '\t'\n")
        [record] = list(store.records())
        assert record.run_name == "r"
        assert "\t" not in record.command

    def test_disabled_store_records_nothing(self, tmp_path):
        path = tmp_path / "history"
        assert FileHistoryStore(path, disabled=True).record("r", "cmd") is None
        assert not path.exists()

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(HistoryError, match="Unable to write history file"):
            FileHistoryStore(blocker / "history").record("r", "cmd")

    def test_minting_avoids_recorded_runs(self, tmp_path):
        store = FileHistoryStore(tmp_path / "history", rng=random.Random(3))
        resolver = RunNameResolver(store)
        seen = set()
        for _ in range(20):
            name = resolver.resolve(None, cluster_bound=True)
            assert name not in seen
            store.record(name, "kuberun run org/repo")
            seen.add(name)
