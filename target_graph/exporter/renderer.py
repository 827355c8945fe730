"""Find and run PlantUML.

Prefer a ``plantuml`` wrapper script on PATH (Ubuntu and friends install one
that runs the jar). Otherwise fall back to ``java -jar plantuml.jar``.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"[0-9]+.[0-9]+.[0-9]+")


@dataclass
class PlantUml:
    command: list[str]
    version: str | None = None


def _run_version(command: list[str]) -> subprocess.CompletedProcess | None:
    try:
        return subprocess.run(
            [*command, "-version"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("Cannot run %s: %s", " ".join(command), e)
        return None


def parse_version(output: str) -> str | None:
    """Look for the version in the first line of ``plantuml -version``."""
    lines = output.splitlines()
    if not lines:
        return None
    m = _VERSION_RE.search(lines[0])
    return m.group(0) if m else None


def find_plantuml() -> PlantUml | None:
    """Locate PlantUML, or return None if it is not installed."""
    command: list[str] | None = None
    executable = shutil.which("plantuml")
    if executable:
        command = [executable]
    else:
        java = shutil.which("java")
        if java:
            probe = _run_version([java, "-jar", "plantuml.jar"])
            if probe is not None and probe.returncode == 0:
                command = [java, "-jar", "plantuml.jar"]
    if command is None:
        return None

    version = None
    result = _run_version(command)
    if result is not None and result.returncode == 0:
        version = parse_version(result.stdout)
    return PlantUml(command=command, version=version)


def render_directory(
    directory: Path,
    plantuml_args: list[str] | None = None,
    plantuml: PlantUml | None = None,
) -> bool:
    """Run PlantUML over every ``.puml`` file in ``directory``.

    Returns True if PlantUML ran and succeeded. Never raises for a missing or
    failing tool.
    """
    plantuml = plantuml or find_plantuml()
    if plantuml is None:
        logger.warning("Cannot run PlantUML; it is not installed")
        return False

    files = sorted(p.name for p in Path(directory).glob("*.puml"))
    if not files:
        logger.warning("No PlantUML files in %s", directory)
        return False

    logger.info("Generating dependency graph with PlantUML %s", plantuml.version or "(unknown version)")
    try:
        result = subprocess.run(
            [*plantuml.command, *(plantuml_args or []), *files],
            cwd=directory,
        )
    except OSError as e:
        logger.warning("PlantUML failed to start: %s", e)
        return False
    if result.returncode != 0:
        logger.warning("PlantUML exited with status %d", result.returncode)
        return False
    logger.info("done")
    return True
