"""Write-only-on-diff artifact writer.

Existing content is read and compared before anything is written, so an
unchanged build touches no files and downstream watchers see no events.
Nothing is cached between calls; every decision re-reads the filesystem.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """Writes and removes generated files.

    Parameters
    ----------
    verbose:
        Print every updated or removed file on the console.
    console:
        Rich console for verbose output. A default console is created if
        not provided.
    """

    def __init__(self, verbose: bool = False, console: Console | None = None) -> None:
        self.verbose = verbose
        self._console = console or Console()

    def enable_verbose(self) -> None:
        self.verbose = True

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @staticmethod
    def read_existing(path: Path | str) -> str:
        """Return the file's content, or an empty string if it is absent.

        Bytes that are not valid UTF-8 are replaced, so a damaged artifact reads
        as stale instead of failing.
        """
        path = Path(path)
        if not path.is_file():
            return ""
        return path.read_bytes().decode("utf-8", errors="replace")

    # ------------------------------------------------------------------
    # Write and delete
    # ------------------------------------------------------------------

    def write_if_changed(self, path: Path | str, content: str) -> bool:
        """Write *content* to *path* unless the file already holds exactly that.

        Parent directories are created as needed. Returns True if the file
        was written.
        """
        path = Path(path)
        data = content.encode("utf-8")
        existing = path.read_bytes() if path.is_file() else b""
        if data == existing:
            return False

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Wrote %s (%d bytes)", path, len(data))
        if self.verbose:
            self._console.print(f"[green]Updated[/green] {path}")
        return True

    def delete_if_exists(
        self, output_path: Path | str, declaration_path: Path | str | None = None
    ) -> bool:
        """Remove an artifact and, if given, its declaration stub.

        Returns True if either file was actually removed.
        """
        removed = False
        for path in (output_path, declaration_path):
            if path is None:
                continue
            path = Path(path)
            if not path.is_file():
                continue
            path.unlink()
            removed = True
            logger.debug("Removed %s", path)
            if self.verbose:
                self._console.print(f"[yellow]Removed[/yellow] {path}")
        return removed
