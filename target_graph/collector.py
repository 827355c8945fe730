"""Recursive collection of the targets declared under a source directory."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from target_graph.buildmodel import BuildModel, BuildModelError, DirectoryProperty
from target_graph.models import compile_patterns, matches_any

logger = logging.getLogger(__name__)


class TargetCollector:
    """Walk a build model's directory tree and gather every declared target."""

    def __init__(self, model: BuildModel, exclude_dirs: list[str] | None = None):
        self.model = model
        self.exclude_dirs: list[re.Pattern[str]] = compile_patterns(exclude_dirs)

    def collect(self, root: Path | str) -> list[str]:
        """Return the targets declared in ``root`` and all its descendants."""
        found: list[str] = []
        self._collect(Path(root).as_posix(), found)
        return found

    def _collect(self, directory: str, found: list[str]) -> None:
        try:
            targets = self.model.get_directory_property(
                directory, DirectoryProperty.BUILDSYSTEM_TARGETS,
            )
            subdirectories = self.model.get_directory_property(
                directory, DirectoryProperty.SUBDIRECTORIES,
            )
        except BuildModelError as e:
            logger.info("Skipping %s: %s", directory, e)
            return

        logger.info("Found %d targets in %s", len(targets), directory)
        found.extend(targets)

        for subdirectory in subdirectories:
            if self._is_excluded(subdirectory):
                logger.info("Skipping %s", subdirectory)
                continue
            self._collect(subdirectory, found)

    def _is_excluded(self, directory: str) -> bool:
        return matches_any(directory, self.exclude_dirs)


def collect_targets(
    model: BuildModel,
    root: Path | str,
    exclude_dirs: list[str] | None = None,
) -> list[str]:
    return TargetCollector(model, exclude_dirs).collect(root)
