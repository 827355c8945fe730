"""Abstract base build model."""

from __future__ import annotations

import abc
import enum
from pathlib import Path
from typing import Any

from target_graph.models import Target, TargetType


class BuildModelError(Exception):
    """Raised when the build model cannot answer a property query."""


class TargetProperty(str, enum.Enum):
    TYPE = "TYPE"
    LINK_LIBRARIES = "LINK_LIBRARIES"
    ALIASED_TARGET = "ALIASED_TARGET"


class DirectoryProperty(str, enum.Enum):
    SUBDIRECTORIES = "SUBDIRECTORIES"
    BUILDSYSTEM_TARGETS = "BUILDSYSTEM_TARGETS"


class BuildModel(abc.ABC):
    """Read-only view of a configured build.

    Backends answer a fixed vocabulary of target and directory properties.
    Directories are identified by absolute POSIX path strings.
    """

    def __init__(self, source_dir: Path, build_dir: Path):
        self.source_dir = Path(source_dir)
        self.build_dir = Path(build_dir)

    @abc.abstractmethod
    def get_target_property(self, target: str, key: TargetProperty) -> Any:
        """Return a target property, or raise BuildModelError."""

    @abc.abstractmethod
    def get_directory_property(self, directory: str, key: DirectoryProperty) -> Any:
        """Return a directory property, or raise BuildModelError."""

    @abc.abstractmethod
    def is_target(self, name: str) -> bool:
        """True if ``name`` is a target (real, alias, or imported) in this build."""

    def get_target(self, name: str) -> Target:
        """Read everything the pipeline needs about one target."""
        return Target(
            name=name,
            type=TargetType.parse(self.get_target_property(name, TargetProperty.TYPE)),
            link_libraries=list(
                self.get_target_property(name, TargetProperty.LINK_LIBRARIES) or []
            ),
            aliased_target=self.get_target_property(name, TargetProperty.ALIASED_TARGET) or None,
        )

    def aliased_target(self, name: str) -> str | None:
        if not self.is_target(name):
            return None
        return self.get_target_property(name, TargetProperty.ALIASED_TARGET) or None
