"""Write PlantUML component diagrams of the target graph."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from target_graph.analysis.graph_models import GraphDocument, group_dependencies
from target_graph.analysis.references import diagram_safe, split_namespace
from target_graph.models import Target

logger = logging.getLogger(__name__)

WHOLE_PROJECT_FILE = "whole_project.puml"

_HEADER = ["@startuml", "skinparam linetype ortho"]
_FOOTER = ["@enduml"]


def _safe_filename(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]", "_", name)


class PlantUmlWriter:
    """Render a :class:`GraphDocument` as PlantUML text."""

    def __init__(self, document: GraphDocument):
        self.document = document

    def actual_dependency(self, name: str) -> str:
        """The diagram id of a dependency.

        Aliases become their real target; anything else has ``:`` replaced by
        ``_`` (``Qt5::Core`` -> ``Qt5__Core``).
        """
        real = self.document.aliases.get(name)
        if real is not None:
            return real
        return diagram_safe(name)

    def whole_project(self) -> str:
        lines = list(_HEADER)
        lines += self._targets(self.document.targets)
        lines += self._groups(self.document.allowed_dependencies)
        for target in self.document.targets:
            lines += self._edges(target.name)
        lines += _FOOTER
        return "\n".join(lines) + "\n"

    def focused(self, target: Target) -> str:
        """A diagram rooted at ``target`` showing only its direct dependencies."""
        lines = list(_HEADER)
        lines += self._targets([target])
        lines += self._groups(self.document.declared.get(target.name, []))
        lines += self._edges(target.name)
        lines += _FOOTER
        return "\n".join(lines) + "\n"

    def _targets(self, targets: list[Target]) -> list[str]:
        namespace = self.document.namespace
        lines: list[str] = []
        if namespace:
            lines.append(f'frame "{namespace}" {{')
        for target in targets:
            lines.append(f"[{target.name}] <<{target.type.label}>>")
        if namespace:
            lines.append("}")
        return lines

    def _groups(self, dependencies: list[str]) -> list[str]:
        lines: list[str] = []
        for package, members in group_dependencies(dependencies, self.document.namespace).items():
            lines.append(f'frame "{package}" {{')
            for name in members:
                _, member = split_namespace(name)
                lines.append(f"[{member}] as {self.actual_dependency(name)}")
            lines.append("}")
        return lines

    def _edges(self, target: str) -> list[str]:
        # A target may link both an alias and its real target.
        actual = dict.fromkeys(
            self.actual_dependency(dep) for dep in self.document.declared.get(target, [])
        )
        return [f"[{target}] --> [{dep}]" for dep in actual]


def write_plantuml_files(document: GraphDocument, output_dir: Path) -> list[Path]:
    """Write the whole-project diagram and one focused diagram per target."""
    output_dir.mkdir(parents=True, exist_ok=True)
    writer = PlantUmlWriter(document)
    files_created: list[Path] = []

    whole = output_dir / WHOLE_PROJECT_FILE
    whole.write_text(writer.whole_project(), encoding="utf-8")
    files_created.append(whole)

    written: dict[Path, str] = {whole: WHOLE_PROJECT_FILE}
    for target in document.targets:
        path = output_dir / f"{_safe_filename(target.name)}.puml"
        if path in written:
            logger.warning(
                "Target %s collides with %s in %s; skipping its diagram",
                target.name, written[path], path.name,
            )
            continue
        written[path] = target.name
        path.write_text(writer.focused(target), encoding="utf-8")
        files_created.append(path)

    logger.info("Wrote %d PlantUML files to %s", len(files_created), output_dir)
    return files_created
