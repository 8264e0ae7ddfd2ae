"""gqlforge CLI — Typer-based command-line interface.

Provides the ``gqlforge`` command with subcommands for building (once or in
watch mode) and for inspecting where a source file's output would go.

All output uses Rich for formatted terminal display.
"""
