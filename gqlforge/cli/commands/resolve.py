"""``gqlforge resolve SOURCE`` — show where a source file's output goes.

Applies the same root/output templates as ``build`` without compiling or
writing anything.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from gqlforge.config import settings
from gqlforge.core.paths import ResolutionError, declaration_path, glob_parent, resolve_output_path

console = Console()


def resolve_cmd(
    source: Path = typer.Argument(
        ...,
        help="Path of a GraphQL source file.",
    ),
    output: str = typer.Option(
        settings.default_output,
        "--output",
        "-o",
        help="Output directory template (may start with {projectRoot}).",
    ),
    root: str = typer.Option(
        None,
        "--root",
        "-d",
        help="Root directory template. Defaults to the source's directory.",
    ),
    emit_declarations: bool = typer.Option(
        False,
        "--emit-declarations",
        "-t",
        help="Also show the .d.ts path.",
    ),
) -> None:
    """Print the generated file path(s) for SOURCE."""
    try:
        target = resolve_output_path(
            source,
            root or glob_parent(str(source)),
            output,
            marker_file=settings.marker_file,
            generated_extension=settings.generated_extension,
        )
    except ResolutionError as exc:
        console.print(f"[bold red]Resolution failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(str(target), highlight=False, soft_wrap=True)
    if emit_declarations:
        stub = declaration_path(
            target,
            generated_extension=settings.generated_extension,
            declaration_extension=settings.declaration_extension,
        )
        console.print(str(stub), highlight=False, soft_wrap=True)
