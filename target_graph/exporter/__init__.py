"""Graph Document, PlantUML, and rendering output."""

from target_graph.exporter.json_exporter import clean_output_directory, write_graph_document
from target_graph.exporter.plantuml_writer import PlantUmlWriter, write_plantuml_files
from target_graph.exporter.renderer import PlantUml, find_plantuml, render_directory

__all__ = [
    "PlantUml",
    "PlantUmlWriter",
    "clean_output_directory",
    "find_plantuml",
    "render_directory",
    "write_graph_document",
    "write_plantuml_files",
]
