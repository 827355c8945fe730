"""Graph assembler: builds the Graph Document from normalized targets."""

from __future__ import annotations

import logging

from target_graph.analysis.graph_models import GraphDocument, NormalizedTargets
from target_graph.buildmodel import BuildModel, BuildModelError, TargetProperty
from target_graph.models import TargetEntry, TargetType

logger = logging.getLogger(__name__)


class GraphAssembler:
    """Combine normalized targets into a deterministic Graph Document."""

    def __init__(self, model: BuildModel | None = None, namespace: str | None = None):
        self.model = model
        self.namespace = namespace

    def assemble(self, normalized: NormalizedTargets) -> GraphDocument:
        document = GraphDocument(
            targets=sorted(normalized.targets, key=lambda t: t.name),
            allowed_dependencies=sorted(normalized.allowed_dependencies),
            declared={k: sorted(v) for k, v in normalized.declared.items()},
            aliases=dict(sorted(normalized.aliases.items())),
            namespace=self.namespace,
        )

        # Step 1: one entry per retained target
        for target in document.targets:
            document.entries[target.name] = TargetEntry(
                type=target.type,
                dependencies=sorted(normalized.dependencies.get(target.name, [])),
            )

        # Step 2: alias annotations on the real targets
        for real in sorted(normalized.annotations):
            annotation = normalized.annotations[real]
            entry = document.entries.get(real)
            if entry is None:
                entry = TargetEntry(type=self._type_of(real))
                document.entries[real] = entry
            entry.package = annotation.package
            entry.alias = annotation.alias

        return document

    def _type_of(self, name: str) -> TargetType:
        if self.model is None:
            return TargetType.UNKNOWN_LIBRARY
        try:
            return TargetType.parse(self.model.get_target_property(name, TargetProperty.TYPE))
        except BuildModelError as e:
            logger.debug("No type for %s: %s", name, e)
            return TargetType.UNKNOWN_LIBRARY
