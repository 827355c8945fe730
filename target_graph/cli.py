"""Click CLI with generate, render, and prepare subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from target_graph import __version__
from target_graph.buildmodel import BuildModelError, load_build_model, write_query
from target_graph.exporter import render_directory
from target_graph.models import GraphConfig
from target_graph.pipeline import run_pipeline


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="-- %(message)s")
    logging.getLogger("target_graph").setLevel(logging.INFO if verbose else logging.WARNING)


@click.group()
@click.version_option(version=__version__)
def cli():
    """target-graph: Diagram a CMake build's targets and their link dependencies."""


@cli.command()
@click.argument("model_path", metavar="MODEL", type=click.Path(exists=True, path_type=Path))
@click.option("--namespace", "-n", help="Namespace grouping the project's own targets")
@click.option("--target-exclude", "target_excludes", multiple=True, help="Regex of targets to leave out (repeatable)")
@click.option("--dependency-exclude", "dependency_excludes", multiple=True, help="Regex of dependencies to leave out (repeatable)")
@click.option("--exclude-dir", "exclude_dirs", multiple=True, help="Regex of directories not to search (repeatable)")
@click.option("--source-dir", type=click.Path(path_type=Path), help="Root directory to search for targets")
@click.option("-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path), help="Directory for the JSON and PlantUML files")
@click.option("--json", "json_path", type=click.Path(dir_okay=False, path_type=Path), help="Where to write the Graph Document")
@click.option("--configuration", help="File API configuration to read (default: first)")
@click.option("--no-plantuml", is_flag=True, help="Write the PlantUML files but do not run PlantUML")
@click.option("--plantuml-arg", "plantuml_args", multiple=True, help="Argument passed to PlantUML (repeatable)")
@click.option("--verbose", "-v", is_flag=True, help="Print progress messages")
def generate(
    model_path: Path,
    namespace: str | None,
    target_excludes: tuple[str, ...],
    dependency_excludes: tuple[str, ...],
    exclude_dirs: tuple[str, ...],
    source_dir: Path | None,
    output_dir: Path | None,
    json_path: Path | None,
    configuration: str | None,
    no_plantuml: bool,
    plantuml_args: tuple[str, ...],
    verbose: bool,
):
    """Build the target dependency graph of MODEL.

    MODEL is a JSON build snapshot or a CMake build directory with a File API
    reply.
    """
    _configure_logging(verbose)

    config = GraphConfig(
        namespace=namespace,
        target_excludes=list(target_excludes),
        dependency_excludes=list(dependency_excludes),
        verbose=verbose,
        source_dir=source_dir.resolve() if source_dir else None,
        output_dir=output_dir,
        no_plantuml=no_plantuml,
        plantuml_args=list(plantuml_args),
        exclude_dirs=list(exclude_dirs) or None,
        json_path=json_path,
    )

    def progress(stage: str, current: int, total: int):
        if verbose and current == 0:
            click.echo(f"  {stage}...")

    try:
        model = load_build_model(model_path, configuration=configuration)
        result = run_pipeline(model, config, progress=progress)
    except (BuildModelError, ValueError) as e:
        raise click.ClickException(str(e))
    except OSError as e:
        raise click.ClickException(f"Cannot write output: {e}")

    click.echo(f"Graphed {result.target_count} target(s) -> {result.json_path}")
    for f in result.diagram_files:
        click.echo(f"  {f}")
    if not no_plantuml and not result.rendered:
        click.echo(click.style("PlantUML did not run; diagrams were not rendered.", fg="yellow"))


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--plantuml-arg", "plantuml_args", multiple=True, help="Argument passed to PlantUML (repeatable)")
@click.option("--verbose", "-v", is_flag=True, help="Print progress messages")
def render(directory: Path, plantuml_args: tuple[str, ...], verbose: bool):
    """Run PlantUML on every .puml file in DIRECTORY."""
    _configure_logging(verbose)
    if render_directory(directory, list(plantuml_args)):
        click.echo(f"Rendered diagrams in {directory}")
    else:
        click.echo(click.style("Nothing rendered.", fg="yellow"))


@cli.command()
@click.argument("build_dir", type=click.Path(file_okay=False, path_type=Path))
def prepare(build_dir: Path):
    """Request a CMake File API codemodel reply for BUILD_DIR."""
    query = write_query(build_dir)
    click.echo(f"Wrote {query}")
    click.echo("Re-run CMake in the build directory, then run 'target-graph generate'.")


if __name__ == "__main__":
    cli()
