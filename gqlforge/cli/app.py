"""Main Typer application — imports and registers all CLI commands.

Entry point: ``gqlforge`` (configured via pyproject.toml console scripts).
"""

from __future__ import annotations

import typer

from gqlforge.cli.commands.build import build_cmd
from gqlforge.cli.commands.resolve import resolve_cmd

app = typer.Typer(
    name="gqlforge",
    help="gqlforge: generate JavaScript modules from GraphQL files, so you can import them.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="build", help="Compile GraphQL files matching PATTERNS.")(build_cmd)
app.command(name="resolve", help="Show the output path for a GraphQL file.")(resolve_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
