"""Write the Graph Document and manage the output directory."""

from __future__ import annotations

import logging
from pathlib import Path

from target_graph.analysis.graph_models import GraphDocument

logger = logging.getLogger(__name__)


def clean_output_directory(output_dir: Path) -> list[Path]:
    """Remove all files from the graph output directory.

    Subdirectories are left alone.
    """
    if not output_dir.is_dir():
        return []
    removed: list[Path] = []
    for path in sorted(output_dir.iterdir()):
        if path.is_file() or path.is_symlink():
            path.unlink()
            removed.append(path)
    if removed:
        logger.info("Removed %d old files from %s", len(removed), output_dir)
    return removed


def write_graph_document(document: GraphDocument, json_path: Path) -> Path:
    """Write the document as sorted, indented JSON. OSError propagates."""
    json_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_text(document.to_json(), encoding="utf-8")
    logger.info("Wrote %s", json_path)
    return json_path
