"""Build orchestrator — the per-file incremental pipeline.

For each source path it resolves the output location, decides which of the
four states applies and acts on it:

- DELETED:   source is gone, remove the artifact and declaration stub
- UNCHANGED: existing artifact already embeds the current source
- STALE:     compile and write the artifact (only if bytes differ)
- TRANSFORM_FAILED: the compiler rejected the source

Per-file problems (resolution, transform, filesystem) never escape
``process_path``; they become failed outcomes so a batch or watch session
keeps going.
"""

from __future__ import annotations

import glob
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

from gqlforge.config import ForgeSettings
from gqlforge.core.compiler import TYPESCRIPT_DECLARATION, TransformError, compile_document
from gqlforge.core.fingerprint import needs_regeneration
from gqlforge.core.paths import ResolutionError, declaration_path, resolve_output_path
from gqlforge.core.watcher import SourceWatcher
from gqlforge.core.writer import ArtifactWriter
from gqlforge.models.config import BuildConfig
from gqlforge.models.outcomes import FileOutcome, FileState, RunTally

logger = logging.getLogger(__name__)


class OutputCollisionError(ResolutionError):
    """Raised when two source files resolve to the same output path."""


class BuildOrchestrator:
    """Coordinates path resolution, change detection, compilation and writes.

    Parameters
    ----------
    config:
        Validated build configuration (``root_template`` must be set).
    transform:
        Source-to-artifact function. Defaults to the GraphQL compiler.
    writer:
        Artifact writer. One honouring ``config.verbose`` is created if not
        provided.
    settings:
        Runtime settings for file extensions and watch polling.
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        transform: Callable[[str], str] = compile_document,
        writer: ArtifactWriter | None = None,
        settings: ForgeSettings | None = None,
    ) -> None:
        if config.root_template is None:
            raise ValueError("BuildConfig.root_template must be resolved before building")
        self.config = config
        self.settings = settings or ForgeSettings()
        self.writer = writer or ArtifactWriter(verbose=config.verbose)
        self._transform = transform
        # Output path -> source path that owns it, for this session only
        self._claims: dict[Path, Path] = {}
        # Serializes the batch loop and watch events
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, source_path: Path | str) -> tuple[Path, Path | None]:
        """Return the (artifact, declaration stub or None) paths for a source."""
        output = resolve_output_path(
            source_path,
            self.config.root_template,
            self.config.output_template,
            marker_file=self.config.marker_file,
            generated_extension=self.settings.generated_extension,
        )
        declaration = None
        if self.config.emit_declarations:
            declaration = declaration_path(
                output,
                generated_extension=self.settings.generated_extension,
                declaration_extension=self.settings.declaration_extension,
            )
        return output, declaration

    def _claim(self, output: Path, source: Path) -> None:
        owner = self._claims.get(output)
        if owner is not None and owner != source:
            raise OutputCollisionError(
                f"{source} and {owner} both resolve to {output}",
                source_path=source,
            )
        self._claims[output] = source

    def _release(self, output: Path, source: Path) -> None:
        if self._claims.get(output) == source:
            del self._claims[output]

    # ------------------------------------------------------------------
    # Per-file pipeline
    # ------------------------------------------------------------------

    def _run_transform(self, source_text: str) -> str:
        """Call the transform, reporting any failure as a ``TransformError``."""
        try:
            return self._transform(source_text)
        except TransformError:
            raise
        except Exception as exc:
            raise TransformError(f"{type(exc).__name__}: {exc}") from exc

    def process_path(self, path: Path | str) -> FileOutcome:
        """Run the pipeline for one source path and report what happened."""
        with self._lock:
            return self._process_path(path)

    def _process_path(self, path: Path | str) -> FileOutcome:
        source = Path(os.path.abspath(path))

        try:
            output, declaration = self.resolve(source)
            if source.exists():
                self._claim(output, source)
        except ResolutionError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            return FileOutcome(
                source_path=source, state=FileState.RESOLUTION_FAILED, error=str(exc)
            )

        try:
            if not source.exists():
                self._release(output, source)
                removed = self.writer.delete_if_exists(output, declaration)
                return FileOutcome(
                    source_path=source,
                    state=FileState.DELETED,
                    output_path=output,
                    changed=removed,
                )

            source_text = source.read_bytes().decode("utf-8")
            stub_changed = declaration is not None and self.writer.write_if_changed(
                declaration, TYPESCRIPT_DECLARATION
            )

            if not needs_regeneration(source_text, self.writer.read_existing(output)):
                return FileOutcome(
                    source_path=source,
                    state=FileState.UNCHANGED,
                    output_path=output,
                    changed=stub_changed,
                )

            artifact = self._run_transform(source_text)
            written = self.writer.write_if_changed(output, artifact)
            return FileOutcome(
                source_path=source,
                state=FileState.STALE,
                output_path=output,
                changed=written or stub_changed,
            )
        except (TransformError, UnicodeDecodeError) as exc:
            logger.error("Failed to compile %s: %s", path, exc)
            return FileOutcome(
                source_path=source,
                state=FileState.TRANSFORM_FAILED,
                output_path=output,
                error=str(exc),
            )
        except OSError as exc:
            logger.error("Filesystem error for %s: %s", path, exc)
            return FileOutcome(
                source_path=source,
                state=FileState.FILESYSTEM_FAILED,
                output_path=output,
                error=str(exc),
            )

    # ------------------------------------------------------------------
    # Drive modes
    # ------------------------------------------------------------------

    @staticmethod
    def discover(patterns: list[str]) -> list[str]:
        """Enumerate files matching the glob patterns, in pattern order.

        Directories are skipped and a path matched by several patterns is
        returned once.
        """
        seen: set[str] = set()
        paths: list[str] = []
        for pattern in patterns:
            for path in sorted(glob.glob(pattern, recursive=True)):
                if os.path.isdir(path):
                    continue
                key = os.path.abspath(path)
                if key in seen:
                    continue
                seen.add(key)
                paths.append(path)
        return paths

    def run_batch(self) -> RunTally:
        """Process every file matching the configured patterns once."""
        tally = RunTally()
        for path in self.discover(self.config.patterns):
            tally.record(self.process_path(path))
        logger.info(
            "Batch finished: %d changed of %d files (%d failed)",
            tally.changed_count, tally.files_count, tally.failed_count,
        )
        return tally

    def watch(self, observer_factory: Callable | None = None) -> RunTally:
        """Run an initial batch, then serve file-system events until interrupted.

        Returns the tally of the initial batch once the watch session ends.
        """
        kwargs = {"observer_factory": observer_factory} if observer_factory else {}
        watcher = SourceWatcher(self.config.patterns, self.process_path, **kwargs)
        # Subscribe before scanning so files touched during the scan still
        # produce events.
        watcher.start()
        try:
            tally = self.run_batch()
        except BaseException:
            watcher.stop()
            raise
        # Everything after the initial scan is reported, as with --verbose.
        self.writer.enable_verbose()
        logger.info("Watching %s for changes", ", ".join(self.config.patterns))
        watcher.serve_forever(poll_interval=self.settings.watch_poll_interval)
        return tally
