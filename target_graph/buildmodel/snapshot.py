"""Build model backed by a JSON snapshot of the build's targets and directories."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from target_graph.buildmodel.base import (
    BuildModel,
    BuildModelError,
    DirectoryProperty,
    TargetProperty,
)
from target_graph.models import TargetType

logger = logging.getLogger(__name__)


class DirectorySnapshot(BaseModel):
    buildsystem_targets: list[str] = Field(default_factory=list)
    subdirectories: list[str] = Field(default_factory=list)


class TargetSnapshot(BaseModel):
    type: TargetType | None = None
    link_libraries: list[str] = Field(default_factory=list)
    aliased_target: str | None = None


class BuildSnapshot(BaseModel):
    source_dir: str
    build_dir: str
    directories: dict[str, DirectorySnapshot] = Field(default_factory=dict)
    targets: dict[str, TargetSnapshot] = Field(default_factory=dict)


def _normalize(path: str) -> str:
    return str(PurePosixPath(path))


class SnapshotBuildModel(BuildModel):
    """Answer property queries from a validated :class:`BuildSnapshot`."""

    def __init__(self, snapshot: BuildSnapshot):
        super().__init__(Path(snapshot.source_dir), Path(snapshot.build_dir))
        self.snapshot = snapshot
        self._directories = {
            _normalize(path): entry for path, entry in snapshot.directories.items()
        }

    @classmethod
    def from_file(cls, path: Path) -> SnapshotBuildModel:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise BuildModelError(f"Cannot read build snapshot {path}: {e}") from e
        try:
            snapshot = BuildSnapshot.model_validate_json(text)
        except ValidationError as e:
            raise BuildModelError(f"Invalid build snapshot {path}: {e}") from e
        logger.debug(
            "Loaded snapshot %s: %d directories, %d targets",
            path, len(snapshot.directories), len(snapshot.targets),
        )
        return cls(snapshot)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotBuildModel:
        try:
            return cls(BuildSnapshot.model_validate(data))
        except ValidationError as e:
            raise BuildModelError(f"Invalid build snapshot: {e}") from e

    def is_target(self, name: str) -> bool:
        return name in self.snapshot.targets

    def get_target_property(self, target: str, key: TargetProperty) -> Any:
        entry = self.snapshot.targets.get(target)
        if entry is None:
            raise BuildModelError(f"Unknown target {target!r}")
        if key == TargetProperty.TYPE:
            if entry.type is None and entry.aliased_target:
                # An alias reports the type of the target it stands for.
                real = self.snapshot.targets.get(entry.aliased_target)
                if real is not None and real.type is not None:
                    return real.type.value
            return (entry.type or TargetType.UNKNOWN_LIBRARY).value
        if key == TargetProperty.LINK_LIBRARIES:
            return list(entry.link_libraries)
        if key == TargetProperty.ALIASED_TARGET:
            return entry.aliased_target
        raise BuildModelError(f"Unsupported target property {key!r}")

    def get_directory_property(self, directory: str, key: DirectoryProperty) -> Any:
        entry = self._directories.get(_normalize(directory))
        if entry is None:
            raise BuildModelError(f"Unknown directory {directory!r}")
        if key == DirectoryProperty.BUILDSYSTEM_TARGETS:
            return list(entry.buildsystem_targets)
        if key == DirectoryProperty.SUBDIRECTORIES:
            return [_normalize(d) for d in entry.subdirectories]
        raise BuildModelError(f"Unsupported directory property {key!r}")
