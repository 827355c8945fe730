"""Build model backed by the CMake File API codemodel reply.

This expects an already-configured build directory. Run :func:`write_query`
before configuring so that CMake writes the ``codemodel-v2`` reply.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

from target_graph.buildmodel.base import (
    BuildModel,
    BuildModelError,
    DirectoryProperty,
    TargetProperty,
)

logger = logging.getLogger(__name__)

_API_DIR = Path(".cmake") / "api" / "v1"

_UNLINKABLE_TYPES = {"UTILITY", "EXECUTABLE"}


def reply_dir_for(build_dir: Path) -> Path:
    return Path(build_dir) / _API_DIR / "reply"


def has_reply(build_dir: Path) -> bool:
    return any(reply_dir_for(build_dir).glob("index-*.json"))


def write_query(build_dir: Path) -> Path:
    """Create the stateless codemodel query file for the next configure."""
    query = Path(build_dir) / _API_DIR / "query" / "codemodel-v2"
    query.parent.mkdir(parents=True, exist_ok=True)
    query.touch()
    return query


def _read_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise BuildModelError(f"Failed to parse {path}: {e}") from e


def _name_from_id(target_id: str) -> str:
    # Target ids look like "name::@hash".
    return target_id.split("::@", 1)[0]


class FileApiBuildModel(BuildModel):
    """Answer property queries from one configuration of a codemodel reply."""

    def __init__(self, build_dir: Path, configuration: str | None = None):
        self.reply_dir = reply_dir_for(build_dir)
        index_files = sorted(self.reply_dir.glob("index-*.json"))
        if not index_files:
            raise BuildModelError(f"No CMake File API reply in {self.reply_dir}")

        # index file names sort by generation time
        index = _read_json(index_files[-1])
        codemodel_file = None
        for obj in index.get("objects", []):
            if obj.get("kind") == "codemodel":
                codemodel_file = obj.get("jsonFile")
                break
        if not codemodel_file:
            raise BuildModelError(f"{index_files[-1]} has no codemodel object")
        codemodel = _read_json(self.reply_dir / codemodel_file)

        paths = codemodel.get("paths", {})
        super().__init__(
            Path(paths.get("source", ".")),
            Path(paths.get("build", build_dir)),
        )
        self.configuration = self._select_configuration(codemodel, configuration)

        self._directories: dict[str, dict] = {}
        self._directory_paths: list[str] = []
        for entry in self.configuration.get("directories", []):
            path = self._absolute(entry.get("source", "."))
            self._directory_paths.append(path)
            self._directories[path] = entry

        self._target_refs: list[dict] = list(self.configuration.get("targets", []))
        self._targets_by_name = {ref["name"]: ref for ref in self._target_refs if ref.get("name")}
        self._details: dict[str, dict] = {}

    @staticmethod
    def _select_configuration(codemodel: dict, name: str | None) -> dict:
        configurations = codemodel.get("configurations", [])
        if not configurations:
            raise BuildModelError("Codemodel reply has no configurations")
        if name is None:
            return configurations[0]
        for config in configurations:
            if config.get("name") == name:
                return config
        available = ", ".join(c.get("name", "") for c in configurations)
        raise BuildModelError(f"No configuration {name!r} in codemodel (have: {available})")

    def _absolute(self, source: str) -> str:
        path = PurePosixPath(source)
        if not path.is_absolute():
            path = PurePosixPath(self.source_dir.as_posix()) / path
        # "." components vanish in PurePosixPath, so the top directory is the source root
        return str(path)

    def _target_details(self, name: str) -> dict:
        if name not in self._details:
            ref = self._targets_by_name.get(name)
            if ref is None:
                raise BuildModelError(f"Unknown target {name!r}")
            self._details[name] = _read_json(self.reply_dir / ref["jsonFile"])
        return self._details[name]

    def is_target(self, name: str) -> bool:
        return name in self._targets_by_name

    def get_target_property(self, target: str, key: TargetProperty) -> Any:
        if key == TargetProperty.ALIASED_TARGET:
            if not self.is_target(target):
                raise BuildModelError(f"Unknown target {target!r}")
            # The File API does not report alias targets.
            return None
        details = self._target_details(target)
        if key == TargetProperty.TYPE:
            return details.get("type")
        if key == TargetProperty.LINK_LIBRARIES:
            return self._link_libraries(details)
        raise BuildModelError(f"Unsupported target property {key!r}")

    def _link_libraries(self, details: dict) -> list[str]:
        """Linked targets, then ``-l`` libraries from the link command line.

        ``dependencies`` also lists add_dependencies() ordering targets, so
        only targets that can be linked are kept.
        """
        names: list[str] = []
        for dep in details.get("dependencies", []):
            if not dep.get("id"):
                continue
            name = _name_from_id(dep["id"])
            if not self.is_target(name):
                continue
            if self._target_details(name).get("type") in _UNLINKABLE_TYPES:
                logger.debug("Ignoring build-order dependency %s of %s", name, details.get("name"))
                continue
            names.append(name)
        for fragment in details.get("link", {}).get("commandFragments", []):
            if fragment.get("role") != "libraries":
                continue
            text = fragment.get("fragment", "").strip()
            if text.startswith("-l") and len(text) > 2:
                names.append(text[2:])
        return list(dict.fromkeys(names))

    def get_directory_property(self, directory: str, key: DirectoryProperty) -> Any:
        entry = self._directories.get(str(PurePosixPath(directory)))
        if entry is None:
            raise BuildModelError(f"Unknown directory {directory!r}")
        if key == DirectoryProperty.SUBDIRECTORIES:
            return [self._directory_paths[i] for i in entry.get("childIndexes", [])]
        if key == DirectoryProperty.BUILDSYSTEM_TARGETS:
            return [self._target_refs[i]["name"] for i in entry.get("targetIndexes", [])]
        raise BuildModelError(f"Unsupported directory property {key!r}")
