"""Source-to-output path resolution.

Maps a source file to the generated file it owns:

    join(output_dir, relative(root_dir, source + generated_extension))

Either directory may be given as a template starting with ``{projectRoot}``,
which is replaced by the nearest ancestor of the source file containing the
marker file (``package.json`` by default).
"""

from __future__ import annotations

import os
import re
from pathlib import Path

PROJECT_ROOT_TOKEN = "{projectRoot}"

_GLOB_MAGIC = re.compile(r"[*?\[{]")


class ResolutionError(RuntimeError):
    """Raised when a source path cannot be mapped to an output path."""

    def __init__(self, message: str, source_path: Path | str | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path


def find_project_root(source_path: Path | str, marker_file: str = "package.json") -> Path:
    """Walk upward from the source's directory to the first one holding *marker_file*.

    Raises ``ResolutionError`` when the filesystem root is reached without
    finding the marker.
    """
    directory = Path(os.path.abspath(source_path)).parent
    while True:
        if (directory / marker_file).exists():
            return directory
        parent = directory.parent
        if parent == directory:
            raise ResolutionError(
                f"Unable to find project root for {source_path}: "
                f"no {marker_file} in any parent directory",
                source_path=source_path,
            )
        directory = parent


def expand_template(
    template: str, source_path: Path | str, marker_file: str = "package.json"
) -> Path:
    """Substitute a leading ``{projectRoot}`` token; literal templates pass through."""
    if template.startswith(PROJECT_ROOT_TOKEN):
        root = find_project_root(source_path, marker_file)
        return Path(str(root) + template[len(PROJECT_ROOT_TOKEN):])
    return Path(template)


def resolve_output_path(
    source_path: Path | str,
    root_template: str,
    output_template: str,
    marker_file: str = "package.json",
    generated_extension: str = ".js",
) -> Path:
    """Compute the absolute path of the artifact generated for *source_path*.

    The extension is appended to the whole file name (``q.graphql`` ->
    ``q.graphql.js``). Sources outside the root directory are allowed; the
    relative part then climbs out with ``..``.
    """
    output_dir = os.path.abspath(expand_template(output_template, source_path, marker_file))
    root_dir = os.path.abspath(expand_template(root_template, source_path, marker_file))
    generated = os.path.abspath(source_path) + generated_extension
    relative = os.path.relpath(generated, root_dir)
    return Path(os.path.normpath(os.path.join(output_dir, relative)))


def declaration_path(
    output_path: Path | str,
    generated_extension: str = ".js",
    declaration_extension: str = ".d.ts",
) -> Path:
    """Path of the declaration stub paired with a generated artifact."""
    name = str(output_path)
    if name.endswith(generated_extension):
        name = name[: -len(generated_extension)]
    return Path(name + declaration_extension)


def glob_parent(pattern: str) -> str:
    """Return the static directory prefix of a glob pattern.

    >>> glob_parent("src/**/*.graphql")
    'src'
    >>> glob_parent("*.graphql")
    '.'
    >>> glob_parent("queries/user.graphql")
    'queries'
    """
    parts = pattern.replace("\\", "/").split("/")
    static: list[str] = []
    for part in parts:
        if _GLOB_MAGIC.search(part):
            break
        static.append(part)
    else:
        # No magic at all: the pattern names a file, so its parent is the dir.
        static = static[:-1]

    if static == [""]:
        return "/"
    return "/".join(static) or "."
