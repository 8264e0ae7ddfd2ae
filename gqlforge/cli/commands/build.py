"""``gqlforge build PATTERNS...`` — compile GraphQL sources to JavaScript modules.

Runs one batch over every matching file and prints the totals. With
``--watch`` it keeps running afterwards and rebuilds files as they change.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from gqlforge.cli._logging import configure_logging
from gqlforge.config import settings
from gqlforge.core.config_guard import ConfigurationError, validate_build_config
from gqlforge.core.orchestrator import BuildOrchestrator
from gqlforge.core.writer import ArtifactWriter
from gqlforge.models.config import BuildConfig
from gqlforge.models.outcomes import RunTally

console = Console()


def _print_summary(tally: RunTally) -> None:
    if not tally.files_count:
        console.print("[dim]No source files matched.[/dim]")
        return

    console.print(
        f"[bold]gqlforge finished.[/bold] "
        f"changed: [cyan]{tally.changed_count}[/cyan]  "
        f"files: [cyan]{tally.files_count}[/cyan]"
    )
    if tally.failures:
        table = Table(title="Failed files")
        table.add_column("Source", style="cyan")
        table.add_column("State", style="red")
        table.add_column("Error")
        for outcome in tally.failures:
            table.add_row(str(outcome.source_path), outcome.state.value, outcome.error or "")
        console.print(table)


def build_cmd(
    patterns: list[str] = typer.Argument(
        ...,
        help="Glob patterns of GraphQL source files, e.g. 'src/**/*.graphql'.",
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        "-w",
        help="Watch for file changes and keep the generated files up to date.",
    ),
    output: str = typer.Option(
        settings.default_output,
        "--output",
        "-o",
        help=(
            "Directory to write output files into. If it starts with {projectRoot} "
            "it is resolved to the nearest parent folder with a package.json file in it."
        ),
    ),
    root: str = typer.Option(
        None,
        "--root",
        "-d",
        help=(
            "Directory source files are considered relative to when computing the "
            "output path. Defaults to the static prefix of the first pattern. "
            "Accepts the {projectRoot} prefix too."
        ),
    ),
    emit_declarations: bool = typer.Option(
        False,
        "--emit-declarations",
        "-t",
        help="Emit a .d.ts file along with each .js file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print every file that is written or removed.",
    ),
) -> None:
    """Compile GraphQL files into importable JavaScript modules.

    Only files whose content changed are written. Sources whose previous
    output already embeds their current text are not recompiled.
    """
    configure_logging(debug=verbose)

    try:
        config = validate_build_config(
            BuildConfig(
                patterns=patterns,
                output_template=output,
                root_template=root,
                emit_declarations=emit_declarations,
                verbose=verbose,
                watch=watch,
                marker_file=settings.marker_file,
            )
        )
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    orchestrator = BuildOrchestrator(
        config,
        writer=ArtifactWriter(verbose=verbose, console=console),
        settings=settings,
    )

    if watch:
        console.print(
            f"[dim]gqlforge watching {', '.join(config.patterns)} for changes. "
            "Press Ctrl+C to exit.[/dim]"
        )
        tally = orchestrator.watch()
        _print_summary(tally)
        return

    tally = orchestrator.run_batch()
    _print_summary(tally)
    if not tally.succeeded:
        raise typer.Exit(code=1)
