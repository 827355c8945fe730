"""Tests for dependency normalization and graph assembly."""

import json

from target_graph.analysis import DependencyNormalizer, GraphAssembler
from target_graph.models import GraphConfig, TargetType
from target_graph.pipeline import build_graph


def _assemble(model, retained, dependency_excludes=None, removed=None, namespace=None):
    normalized = DependencyNormalizer(model, dependency_excludes).normalize(retained, removed)
    return GraphAssembler(model, namespace=namespace).assemble(normalized)


# ── Normalizer ────────────────────────────────────────────────

class TestDependencyNormalizer:
    def test_aliases_are_separated(self, scenario_model):
        result = DependencyNormalizer(scenario_model).normalize(["App::app", "app", "core"])
        assert [t.name for t in result.targets] == ["app", "core"]
        assert result.alias_targets == ["App::app"]

    def test_allowed_dependencies_unwrapped_and_filtered(self, demo_model):
        normalizer = DependencyNormalizer(demo_model, [r"stdc\+\+fs"])
        result = normalizer.normalize(["app", "core"])
        assert result.allowed_dependencies == [
            "Demo::core", "Qt5::Core", "Threads::Threads", "fmt::fmt",
        ]

    def test_dependencies_resolved_through_aliases(self, demo_model):
        result = DependencyNormalizer(demo_model).normalize(["app", "core"])
        assert result.declared["app"] == ["Demo::core", "Qt5::Core", "stdc++fs"]
        assert result.dependencies["app"] == ["Qt5::Core", "core", "stdc++fs"]
        assert result.dependencies["core"] == ["Threads::Threads", "fmt"]

    def test_annotations(self, demo_model):
        result = DependencyNormalizer(demo_model).normalize(["app", "core"])
        assert result.aliases == {"Demo::core": "core", "fmt::fmt": "fmt"}
        assert result.annotations["core"].package == "Demo"
        assert result.annotations["core"].alias == "Demo::core"
        assert result.annotations["fmt"].package == "fmt"

    def test_resolution_is_a_function(self, demo_model):
        normalizer = DependencyNormalizer(demo_model)
        assert normalizer.resolve("Demo::core") == normalizer.resolve("Demo::core") == "core"
        assert normalizer.resolve("Qt5::Core") == "Qt5::Core"

    def test_unresolvable_namespaced_target_is_logged(self, model_factory, caplog):
        model = model_factory({
            "app": ("EXECUTABLE", ["GTest::gtest"]),
            "GTest::gtest": ("UNKNOWN_LIBRARY", []),
        })
        with caplog.at_level("INFO", logger="target_graph"):
            result = DependencyNormalizer(model).normalize(["app"])
        assert "Still need to figure out dependency target GTest::gtest" in caplog.text
        assert result.annotations == {}
        assert result.dependencies["app"] == ["GTest::gtest"]

    def test_excluded_alias_is_not_annotated(self, demo_model):
        result = DependencyNormalizer(demo_model, ["^Demo::"]).normalize(["app", "core"])
        assert "core" not in result.annotations
        assert result.dependencies["app"] == ["Qt5::Core", "stdc++fs"]

    def test_alias_of_removed_target_is_not_annotated(self, scenario_model):
        result = DependencyNormalizer(scenario_model).normalize(["App::app", "core"], removed={"app"})
        assert result.aliases == {"App::app": "app"}
        assert result.annotations == {}

    def test_first_alias_wins(self, model_factory):
        model = model_factory({
            "core": ("STATIC_LIBRARY", []),
            "app": ("EXECUTABLE", ["B::core", "A::core"]),
            "A::core": {"aliased_target": "core"},
            "B::core": {"aliased_target": "core"},
        })
        result = DependencyNormalizer(model).normalize(["app", "core"])
        assert result.annotations["core"].alias == "A::core"
        assert result.dependencies["app"] == ["core"]

    def test_empty_wrapper_dropped(self, model_factory):
        model = model_factory({"app": ("EXECUTABLE", ["$<CONFIG>", "m"])})
        result = DependencyNormalizer(model).normalize(["app"])
        assert result.allowed_dependencies == ["m"]
        assert result.dependencies["app"] == ["m"]


# ── Assembler ─────────────────────────────────────────────────

class TestGraphAssembler:
    def test_scenario_alias_annotation(self, scenario_model):
        document = build_graph(scenario_model, GraphConfig(namespace="App"))
        assert document.to_dict() == {
            "app": {
                "type": "EXECUTABLE",
                "dependencies": ["core"],
                "package": "App",
                "alias": "App::app",
            },
            "core": {"type": "STATIC_LIBRARY", "dependencies": []},
        }

    def test_scenario_excluded_target(self, model_factory):
        model = model_factory({
            "core": ("STATIC_LIBRARY", []),
            "legacy_test": ("EXECUTABLE", ["core"]),
        })
        document = build_graph(model, GraphConfig(target_excludes=[".*_test"]))
        assert "legacy_test" not in document.to_dict()
        assert list(document.to_dict()) == ["core"]

    def test_scenario_wrapped_external(self, model_factory):
        model = model_factory({"app": ("EXECUTABLE", ["$<LINK_ONLY:Qt5::Core>"])})
        document = build_graph(model, GraphConfig())
        assert document.entries["app"].dependencies == ["Qt5::Core"]
        assert document.groups() == {"Qt5": ["Qt5::Core"]}

    def test_annotation_only_entry_gets_type(self, demo_model):
        document = _assemble(demo_model, ["app", "core"], [r"stdc\+\+fs"])
        assert document.to_dict()["fmt"] == {
            "type": "STATIC_LIBRARY",
            "dependencies": [],
            "package": "fmt",
            "alias": "fmt::fmt",
        }

    def test_entries_use_normalized_dependencies(self, demo_model):
        normalized = DependencyNormalizer(demo_model).normalize(["app", "core"])
        document = GraphAssembler(demo_model).assemble(normalized)
        for name in ("app", "core"):
            assert document.entries[name].dependencies == normalized.dependencies[name]

    def test_empty_graph(self, demo_model):
        document = _assemble(demo_model, [])
        assert document.to_dict() == {}
        assert document.to_json() == "{}\n"

    def test_edges(self, demo_model):
        document = _assemble(demo_model, ["app", "core"], [r"stdc\+\+fs"])
        assert document.edges() == [
            ("app", "Qt5::Core"),
            ("app", "core"),
            ("core", "Threads::Threads"),
            ("core", "fmt"),
        ]

    def test_groups_skip_own_namespace(self, demo_model):
        document = _assemble(demo_model, ["app", "core"], namespace="Demo")
        assert document.groups() == {
            "Qt5": ["Qt5::Core"],
            "Threads": ["Threads::Threads"],
            "fmt": ["fmt::fmt"],
        }

    def test_assembling_twice_is_byte_identical(self, demo_model):
        normalized = DependencyNormalizer(demo_model).normalize(["core", "app"])
        assembler = GraphAssembler(demo_model)
        assert assembler.assemble(normalized).to_json() == assembler.assemble(normalized).to_json()

    def test_json_is_sorted(self, demo_model):
        text = _assemble(demo_model, ["core", "app"]).to_json()
        data = json.loads(text)
        assert list(data) == sorted(data)
        assert text == json.dumps(data, indent=2, sort_keys=True) + "\n"

    def test_unreadable_target_is_skipped(self, model_factory):
        model = model_factory({"lib": ("INTERFACE_LIBRARY", [])})
        document = _assemble(model, ["lib", "ghost"])
        assert "ghost" not in document.entries
        assert document.entries["lib"].type == TargetType.INTERFACE_LIBRARY

    def test_undefined_collected_target_is_skipped(self, model_factory):
        model = model_factory(
            {"core": ("STATIC_LIBRARY", [])},
            directories={"/src": {"buildsystem_targets": ["core", "ghost"]}},
        )
        assert build_graph(model, GraphConfig()).to_dict() == {
            "core": {"type": "STATIC_LIBRARY", "dependencies": []},
        }

    def test_excluded_alias_target_leaves_real_target_unannotated(self, model_factory):
        model = model_factory(
            {
                "legacy": ("STATIC_LIBRARY", []),
                "App::legacy_test": {"aliased_target": "legacy"},
            },
            directories={"/src": {"buildsystem_targets": ["legacy", "App::legacy_test"]}},
        )
        document = build_graph(model, GraphConfig(target_excludes=[".*_test"]))
        assert document.to_dict() == {
            "legacy": {"type": "STATIC_LIBRARY", "dependencies": []},
        }

    def test_alias_of_excluded_target_adds_no_entry(self, model_factory):
        model = model_factory(
            {
                "core": ("STATIC_LIBRARY", []),
                "legacy_test": ("EXECUTABLE", ["core"]),
                "App::legacy": {"aliased_target": "legacy_test"},
            },
            directories={"/src": {"buildsystem_targets": ["core", "legacy_test", "App::legacy"]}},
        )
        document = build_graph(model, GraphConfig(target_excludes=[".*_test"]))
        assert list(document.to_dict()) == ["core"]
        assert document.aliases == {"App::legacy": "legacy_test"}
