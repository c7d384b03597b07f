"""Tests for kuberun.launch.naming grammars."""

from __future__ import annotations

import pytest

from kuberun.launch.naming import (
    matches_cluster_name,
    matches_run_name,
    normalize_run_name,
)


class TestRunNameGrammar:
    @pytest.mark.parametrize("name", [
        "a",
        "hello",
        "Hello_World",
        "happy-turing",
        "run1",
        "a1-b2_c3",
        "x" * 80,
    ])
    def test_valid(self, name):
        assert matches_run_name(name)

    @pytest.mark.parametrize("name", [
        "",
        "1run",
        "-run",
        "run-",
        "run_",
        "run--x",
        "run_-x",
        "run.x",
        "run x",
        "x" * 81,
        "run\n",
    ])
    def test_invalid(self, name):
        assert not matches_run_name(name)

    def test_case_insensitive(self):
        assert matches_run_name("MyRun")
        assert matches_run_name("MYRUN")


class TestClusterNameGrammar:
    @pytest.mark.parametrize("name", [
        "a",
        "my-run",
        "my-run.v2",
        "0abc",
        "a.b.c",
        "run-1-x",
    ])
    def test_valid(self, name):
        assert matches_cluster_name(name)

    @pytest.mark.parametrize("name", [
        "",
        "My-run",
        "my_run",
        "-run",
        "run-",
        "run--x",
        "run.",
        ".run",
        "a..b",
        "a.-b",
    ])
    def test_invalid(self, name):
        assert not matches_cluster_name(name)

    def test_grammars_disagree_on_underscores(self):
        assert matches_run_name("my_run")
        assert not matches_cluster_name("my_run")
        assert matches_cluster_name(normalize_run_name("my_run"))


class TestNormalize:
    def test_underscores_become_hyphens(self):
        assert normalize_run_name("quirky_einstein") == "quirky-einstein"

    def test_idempotent(self):
        once = normalize_run_name("a_b_c")
        assert normalize_run_name(once) == once == "a-b-c"
