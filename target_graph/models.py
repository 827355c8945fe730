"""Data models for the target-graph pipeline."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from target_graph.buildmodel.base import BuildModel


class TargetType(enum.Enum):
    EXECUTABLE = "EXECUTABLE"
    STATIC_LIBRARY = "STATIC_LIBRARY"
    SHARED_LIBRARY = "SHARED_LIBRARY"
    MODULE_LIBRARY = "MODULE_LIBRARY"
    OBJECT_LIBRARY = "OBJECT_LIBRARY"
    INTERFACE_LIBRARY = "INTERFACE_LIBRARY"
    UTILITY = "UTILITY"
    UNKNOWN_LIBRARY = "UNKNOWN_LIBRARY"

    @property
    def label(self) -> str:
        """Stereotype shown in diagrams, e.g. ``static library``."""
        return self.value.lower().replace("_", " ")

    @classmethod
    def parse(cls, value: str | None) -> TargetType:
        if not value:
            return cls.UNKNOWN_LIBRARY
        try:
            return cls(value.upper())
        except ValueError:
            return cls.UNKNOWN_LIBRARY


class ReferenceKind(enum.Enum):
    PLAIN = "plain"
    WRAPPED = "wrapped"
    NAMESPACED = "namespaced"


@dataclass(frozen=True)
class DependencyReference:
    """A parsed link dependency, as declared on a target."""
    raw: str
    kind: ReferenceKind
    name: str  # unwrapped name, "" when a wrapper holds no value
    package: str | None = None
    member: str | None = None

    @property
    def is_namespaced(self) -> bool:
        return self.package is not None


@dataclass
class Target:
    """A build target as reported by the build model."""
    name: str
    type: TargetType
    link_libraries: list[str] = field(default_factory=list)
    aliased_target: str | None = None

    @property
    def is_alias(self) -> bool:
        return self.aliased_target is not None


@dataclass
class AliasAnnotation:
    package: str
    alias: str


@dataclass
class TargetEntry:
    """One key of the Graph Document."""
    type: TargetType
    dependencies: list[str] = field(default_factory=list)
    package: str | None = None
    alias: str | None = None

    def to_dict(self) -> dict:
        data: dict = {
            "type": self.type.value,
            "dependencies": list(self.dependencies),
        }
        if self.alias is not None:
            data["package"] = self.package
            data["alias"] = self.alias
        return data


@dataclass
class GraphResult:
    """Result of a full pipeline run."""
    output_dir: Path
    json_path: Path
    target_count: int = 0
    diagram_files: list[Path] = field(default_factory=list)
    rendered: bool = False


@dataclass
class GraphConfig:
    """Configuration for the graph pipeline."""
    namespace: str | None = None
    target_excludes: list[str] = field(default_factory=list)
    dependency_excludes: list[str] = field(default_factory=list)
    verbose: bool = False
    source_dir: Path | None = None
    output_dir: Path | None = None
    no_plantuml: bool = False
    plantuml_args: list[str] = field(default_factory=list)
    exclude_dirs: list[str] | None = None
    json_path: Path | None = None

    def resolve(self, model: BuildModel) -> GraphConfig:
        """Fill unset paths from the build model's source and build trees."""
        source_dir = self.source_dir or model.source_dir
        output_dir = self.output_dir or model.build_dir / "dependency_graphs"
        exclude_dirs = self.exclude_dirs
        if exclude_dirs is None:
            exclude_dirs = [re.escape(model.build_dir.as_posix()) + "/_deps/.*"]
        return GraphConfig(
            namespace=self.namespace,
            target_excludes=list(self.target_excludes),
            dependency_excludes=list(self.dependency_excludes),
            verbose=self.verbose,
            source_dir=source_dir,
            output_dir=output_dir,
            no_plantuml=self.no_plantuml,
            plantuml_args=list(self.plantuml_args),
            exclude_dirs=list(exclude_dirs),
            json_path=self.json_path or output_dir / "targets.json",
        )


def compile_patterns(patterns: list[str] | None) -> list[re.Pattern[str]]:
    """Compile exclusion regexes, naming the offending pattern on failure."""
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns or []:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ValueError(f"Invalid regular expression {pattern!r}: {e}") from e
    return compiled


def matches_any(name: str, patterns: list[re.Pattern[str]]) -> bool:
    return any(p.search(name) for p in patterns)
