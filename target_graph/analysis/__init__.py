"""Dependency analysis: reference parsing, normalization, and graph assembly."""

from __future__ import annotations

from target_graph.analysis.graph_builder import GraphAssembler
from target_graph.analysis.graph_models import GraphDocument, NormalizedTargets, group_dependencies
from target_graph.analysis.normalizer import DependencyNormalizer
from target_graph.analysis.references import diagram_safe, parse_reference, unwrap

__all__ = [
    "DependencyNormalizer",
    "GraphAssembler",
    "GraphDocument",
    "NormalizedTargets",
    "diagram_safe",
    "group_dependencies",
    "parse_reference",
    "unwrap",
]
