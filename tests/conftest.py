"""Shared fixtures: small in-memory build models."""

from pathlib import Path

import pytest

from target_graph.buildmodel import SnapshotBuildModel

FIXTURES = Path(__file__).parent / "fixtures"


def make_model(targets, directories=None, source_dir="/src", build_dir="/src/build"):
    """Build a snapshot model.

    ``targets`` maps name -> (type, link_libraries) or name -> {"aliased_target": ...}.
    Without ``directories`` every non-alias target sits in ``source_dir``.
    """
    target_data = {}
    for name, value in targets.items():
        if isinstance(value, dict):
            target_data[name] = value
        else:
            target_type, link_libraries = value
            target_data[name] = {"type": target_type, "link_libraries": list(link_libraries)}
    if directories is None:
        directories = {
            source_dir: {
                "buildsystem_targets": [
                    n for n, v in target_data.items() if not v.get("aliased_target")
                ],
            },
        }
    return SnapshotBuildModel.from_dict({
        "source_dir": source_dir,
        "build_dir": build_dir,
        "directories": directories,
        "targets": target_data,
    })


@pytest.fixture
def demo_model():
    return SnapshotBuildModel.from_file(FIXTURES / "snapshot.json")


@pytest.fixture
def scenario_model():
    """core <- app, with App::app aliasing app, all declared in one directory."""
    return make_model(
        {
            "core": ("STATIC_LIBRARY", []),
            "app": ("EXECUTABLE", ["core"]),
            "App::app": {"aliased_target": "app"},
        },
        directories={"/src": {"buildsystem_targets": ["core", "app", "App::app"]}},
    )


@pytest.fixture
def model_factory():
    return make_model
