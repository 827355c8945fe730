"""Remove CTest housekeeping, utility, and user-excluded targets."""

from __future__ import annotations

import logging

from target_graph.buildmodel import BuildModel, BuildModelError, TargetProperty
from target_graph.models import TargetType, compile_patterns, matches_any

logger = logging.getLogger(__name__)

_CTEST_MODELS = ("Experimental", "Nightly", "Continuous")
_CTEST_STAGES = (
    "",
    "MemoryCheck",
    "Start",
    "Update",
    "Configure",
    "Build",
    "Test",
    "Coverage",
    "MemCheck",
    "Submit",
)

CTEST_TARGETS: frozenset[str] = frozenset(
    model + stage for model in _CTEST_MODELS for stage in _CTEST_STAGES
)


def filter_ctest_targets(targets: list[str]) -> list[str]:
    return [t for t in targets if t not in CTEST_TARGETS]


def filter_utility_targets(targets: list[str], model: BuildModel) -> list[str]:
    """Drop targets created by add_custom_target() and friends."""
    kept: list[str] = []
    for target in targets:
        try:
            target_type = TargetType.parse(
                model.get_target_property(target, TargetProperty.TYPE)
            )
        except BuildModelError as e:
            logger.info("Skipping %s: %s", target, e)
            continue
        if target_type != TargetType.UTILITY:
            kept.append(target)
    return kept


def filter_by_regex(names: list[str], patterns: list[str] | None) -> list[str]:
    """Remove every name that matches any of ``patterns``."""
    compiled = compile_patterns(patterns)
    if not compiled:
        return list(names)
    return [n for n in names if not matches_any(n, compiled)]


def filter_targets(
    targets: list[str],
    model: BuildModel,
    excludes: list[str] | None = None,
) -> list[str]:
    """Return the sorted, deduplicated targets that are real build artifacts."""
    kept = filter_ctest_targets(targets)
    kept = filter_utility_targets(kept, model)
    logger.info("Found %d targets after filtering CMake targets", len(kept))
    if excludes:
        logger.info("Filtering by regular expressions: %s", ", ".join(excludes))
        kept = filter_by_regex(kept, excludes)
        logger.info("Found %d targets after filtering by regular expressions", len(kept))
    return sorted(set(kept))
