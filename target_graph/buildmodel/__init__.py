"""Build model backends and loader."""

from __future__ import annotations

from pathlib import Path

from target_graph.buildmodel.base import (
    BuildModel,
    BuildModelError,
    DirectoryProperty,
    TargetProperty,
)
from target_graph.buildmodel.fileapi import FileApiBuildModel, has_reply, write_query
from target_graph.buildmodel.snapshot import BuildSnapshot, SnapshotBuildModel


def load_build_model(path: Path, configuration: str | None = None) -> BuildModel:
    """Load a JSON build snapshot, or the File API reply of a build directory."""
    path = Path(path)
    if path.is_file():
        return SnapshotBuildModel.from_file(path)
    if path.is_dir():
        if has_reply(path):
            return FileApiBuildModel(path, configuration=configuration)
        raise BuildModelError(
            f"{path} has no CMake File API reply. "
            f"Run 'target-graph prepare {path}' and re-run CMake first."
        )
    raise BuildModelError(f"No build snapshot or build directory at {path}")


__all__ = [
    "BuildModel",
    "BuildModelError",
    "BuildSnapshot",
    "DirectoryProperty",
    "FileApiBuildModel",
    "SnapshotBuildModel",
    "TargetProperty",
    "load_build_model",
    "write_query",
]
