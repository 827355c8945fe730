"""Data models for the target dependency graph."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from target_graph.analysis.references import split_namespace
from target_graph.models import AliasAnnotation, Target, TargetEntry


@dataclass
class NormalizedTargets:
    """Output of the dependency normalizer, input of the graph assembler."""
    targets: list[Target] = field(default_factory=list)  # retained real targets, sorted
    alias_targets: list[str] = field(default_factory=list)
    allowed_dependencies: list[str] = field(default_factory=list)
    declared: dict[str, list[str]] = field(default_factory=dict)  # target -> allowed unwrapped names
    dependencies: dict[str, list[str]] = field(default_factory=dict)  # target -> alias-resolved names
    aliases: dict[str, str] = field(default_factory=dict)  # alias -> real target
    annotations: dict[str, AliasAnnotation] = field(default_factory=dict)  # real target -> annotation


@dataclass
class GraphDocument:
    entries: dict[str, TargetEntry] = field(default_factory=dict)
    targets: list[Target] = field(default_factory=list)
    allowed_dependencies: list[str] = field(default_factory=list)
    declared: dict[str, list[str]] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    namespace: str | None = None

    def to_dict(self) -> dict:
        return {name: self.entries[name].to_dict() for name in sorted(self.entries)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n"

    def edges(self) -> list[tuple[str, str]]:
        return [
            (name, dep)
            for name in sorted(self.entries)
            for dep in self.entries[name].dependencies
        ]

    def groups(self, dependencies: list[str] | None = None) -> dict[str, list[str]]:
        """Namespaced external dependencies by package.

        Names in the project's own namespace are not external and are left
        out. Defaults to every allowed dependency.
        """
        return group_dependencies(
            self.allowed_dependencies if dependencies is None else dependencies,
            self.namespace,
        )


def group_dependencies(names: list[str], namespace: str | None = None) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for name in sorted(set(names)):
        parts = split_namespace(name)
        if parts is None:
            continue
        if namespace and parts[0] == namespace:
            continue
        grouped.setdefault(parts[0], []).append(name)
    return grouped
