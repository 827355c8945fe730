"""Dependency normalizer: unwraps, filters, and alias-resolves link dependencies."""

from __future__ import annotations

import logging

from target_graph.analysis.graph_models import NormalizedTargets
from target_graph.analysis.references import package_of, split_namespace, unwrap
from target_graph.buildmodel import BuildModel, BuildModelError
from target_graph.models import (
    AliasAnnotation,
    Target,
    compile_patterns,
    matches_any,
)

logger = logging.getLogger(__name__)


class DependencyNormalizer:
    """Normalize the link dependencies of the retained targets."""

    def __init__(self, model: BuildModel, dependency_excludes: list[str] | None = None):
        self.model = model
        self.dependency_excludes = compile_patterns(dependency_excludes)
        self._resolved: dict[str, str | None] = {}

    def normalize(
        self,
        retained: list[str],
        removed: set[str] | None = None,
    ) -> NormalizedTargets:
        """Normalize ``retained`` targets.

        ``removed`` holds collected targets the filter dropped; aliases of
        those are not annotated.
        """
        removed = removed or set()
        result = NormalizedTargets()

        for name in sorted(set(retained)):
            target = self._load(name)
            if target is None:
                continue
            if target.is_alias:
                result.alias_targets.append(name)
            else:
                result.targets.append(target)

        result.allowed_dependencies = self.allowed_dependencies(result.targets)
        allowed = set(result.allowed_dependencies)

        candidates: set[str] = set(result.alias_targets)
        for target in result.targets:
            declared: set[str] = set()
            for raw in target.link_libraries:
                name = unwrap(raw)
                if not name:
                    logger.debug("Dropping empty reference %r of %s", raw, target.name)
                    continue
                if name not in allowed:
                    continue
                declared.add(name)
                if self.model.is_target(name):
                    candidates.add(name)
            result.declared[target.name] = sorted(declared)
            result.dependencies[target.name] = sorted({self.resolve(d) for d in declared})

        self._annotate(sorted(candidates), removed, result)
        return result

    def allowed_dependencies(self, targets: list[Target]) -> list[str]:
        """Sorted set of unwrapped dependency names that survive the excludes."""
        names: set[str] = set()
        for target in targets:
            for raw in target.link_libraries:
                name = unwrap(raw)
                if name:
                    names.add(name)
        if self.dependency_excludes:
            names = {n for n in names if not matches_any(n, self.dependency_excludes)}
        logger.info("Found %d dependencies", len(names))
        return sorted(names)

    def resolve(self, name: str) -> str:
        """The real target behind an alias, else ``name`` itself."""
        return self.aliased_target(name) or name

    def aliased_target(self, name: str) -> str | None:
        if name not in self._resolved:
            try:
                self._resolved[name] = self.model.aliased_target(name)
            except BuildModelError as e:
                logger.info("Cannot resolve %s: %s", name, e)
                self._resolved[name] = None
        return self._resolved[name]

    def _load(self, name: str) -> Target | None:
        try:
            return self.model.get_target(name)
        except BuildModelError as e:
            logger.info("Skipping %s: %s", name, e)
            return None

    def _annotate(
        self,
        candidates: list[str],
        removed: set[str],
        result: NormalizedTargets,
    ) -> None:
        for name in candidates:
            real = self.aliased_target(name)
            if real is None:
                if split_namespace(name) is not None:
                    logger.info("Still need to figure out dependency target %s", name)
                continue
            result.aliases[name] = real
            if real in removed:
                logger.debug("Not annotating %s; %s was filtered out", name, real)
                continue
            if real in result.annotations:
                logger.debug(
                    "%s already annotated as %s; ignoring %s",
                    real, result.annotations[real].alias, name,
                )
                continue
            result.annotations[real] = AliasAnnotation(package=package_of(name), alias=name)
