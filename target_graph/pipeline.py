"""Pipeline orchestrator: collect -> filter -> normalize -> assemble -> export -> render."""

from __future__ import annotations

import logging
from typing import Callable

from target_graph.analysis import DependencyNormalizer, GraphAssembler, GraphDocument
from target_graph.buildmodel import BuildModel
from target_graph.collector import collect_targets
from target_graph.exporter import (
    clean_output_directory,
    render_directory,
    write_graph_document,
    write_plantuml_files,
)
from target_graph.filters import filter_targets
from target_graph.models import GraphConfig, GraphResult, compile_patterns

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def _validate_patterns(config: GraphConfig) -> None:
    for patterns in (config.target_excludes, config.dependency_excludes, config.exclude_dirs):
        compile_patterns(patterns)


def _enable_progress_logging() -> None:
    package_logger = logging.getLogger("target_graph")
    if not package_logger.isEnabledFor(logging.INFO):
        package_logger.setLevel(logging.INFO)


def build_graph(
    model: BuildModel,
    config: GraphConfig,
    progress: ProgressCallback | None = None,
) -> GraphDocument:
    """Stages 1-4: build the Graph Document without touching the filesystem."""
    config = config.resolve(model)
    _validate_patterns(config)
    if config.verbose:
        _enable_progress_logging()

    # Stage 1: Collect
    if progress:
        progress("Collecting", 0, 1)
    logger.info("Searching for targets in %s", config.source_dir)
    collected = collect_targets(model, config.source_dir, config.exclude_dirs)
    logger.info("Found %d targets before filtering", len(collected))
    if progress:
        progress("Collecting", 1, 1)

    # Stage 2: Filter
    if progress:
        progress("Filtering", 0, 1)
    retained = filter_targets(collected, model, config.target_excludes)
    removed = set(collected) - set(retained)
    logger.info("Found %d targets", len(retained))
    if progress:
        progress("Filtering", 1, 1)

    # Stage 3: Normalize
    if progress:
        progress("Normalizing", 0, 1)
    normalized = DependencyNormalizer(model, config.dependency_excludes).normalize(retained, removed)
    if progress:
        progress("Normalizing", 1, 1)

    # Stage 4: Assemble
    return GraphAssembler(model, namespace=config.namespace).assemble(normalized)


def run_pipeline(
    model: BuildModel,
    config: GraphConfig,
    progress: ProgressCallback | None = None,
) -> GraphResult:
    """Run the full pipeline and write every output file."""
    config = config.resolve(model)
    # Fail on bad patterns before the output directory is cleared.
    _validate_patterns(config)

    clean_output_directory(config.output_dir)
    document = build_graph(model, config, progress)

    # Stage 5: Export
    if progress:
        progress("Exporting", 0, 1)
    result = GraphResult(
        output_dir=config.output_dir,
        json_path=write_graph_document(document, config.json_path),
        target_count=len(document.targets),
    )
    result.diagram_files = write_plantuml_files(document, config.output_dir)
    if progress:
        progress("Exporting", 1, 1)

    # Stage 6: Render
    if not config.no_plantuml:
        if progress:
            progress("Rendering", 0, 1)
        result.rendered = render_directory(config.output_dir, config.plantuml_args)
        if progress:
            progress("Rendering", 1, 1)

    return result
