"""Tests for target filtering."""

import pytest

from target_graph.filters import (
    CTEST_TARGETS,
    filter_by_regex,
    filter_ctest_targets,
    filter_targets,
    filter_utility_targets,
)


class TestCTestTargets:
    def test_thirty_names(self):
        assert len(CTEST_TARGETS) == 30
        assert "Experimental" in CTEST_TARGETS
        assert "ContinuousSubmit" in CTEST_TARGETS

    def test_exact_match_only(self):
        kept = filter_ctest_targets(["NightlyMemoryCheck", "NightlyMemoryCheckExtra", "core"])
        assert kept == ["NightlyMemoryCheckExtra", "core"]

    def test_removed_regardless_of_type(self, model_factory):
        model = model_factory({"NightlyMemoryCheck": ("STATIC_LIBRARY", [])})
        assert filter_targets(["NightlyMemoryCheck"], model) == []


def test_utility_targets_removed(demo_model):
    assert filter_utility_targets(["format", "core", "app"], demo_model) == ["core", "app"]


def test_unreadable_target_is_skipped(demo_model, caplog):
    with caplog.at_level("INFO", logger="target_graph"):
        assert filter_utility_targets(["mystery", "core"], demo_model) == ["core"]
    assert "Skipping mystery" in caplog.text


def test_filter_by_regex_search_semantics():
    names = ["legacy_test", "core", "core_test", "testing"]
    assert filter_by_regex(names, [".*_test"]) == ["core", "testing"]
    assert filter_by_regex(names, ["^test"]) == ["legacy_test", "core", "core_test"]


def test_filter_by_regex_without_patterns():
    assert filter_by_regex(["a", "b"], []) == ["a", "b"]


def test_invalid_pattern():
    with pytest.raises(ValueError, match="Invalid regular expression"):
        filter_by_regex(["a"], ["("])


def test_filter_targets_sorted_and_deduplicated(demo_model):
    collected = ["core", "app", "Nightly", "format", "core_test", "app"]
    assert filter_targets(collected, demo_model) == ["app", "core", "core_test"]
    assert filter_targets(collected, demo_model, ["_test$"]) == ["app", "core"]


def test_filter_is_idempotent(demo_model):
    collected = ["Experimental", "Nightly", "NightlyMemoryCheck", "format",
                 "core", "app", "core_test", "fmt"]
    once = filter_targets(collected, demo_model, ["_test$"])
    assert filter_targets(once, demo_model, ["_test$"]) == once


def test_empty_input(demo_model):
    assert filter_targets([], demo_model, ["x"]) == []
