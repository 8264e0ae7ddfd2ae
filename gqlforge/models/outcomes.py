"""Per-file build outcomes and run tallies."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class FileState(str, Enum):
    """What the pipeline found (and did) for one source path."""

    DELETED = "deleted"
    UNCHANGED = "unchanged"
    STALE = "stale"
    TRANSFORM_FAILED = "transform_failed"
    RESOLUTION_FAILED = "resolution_failed"
    FILESYSTEM_FAILED = "filesystem_failed"


FAILED_STATES: frozenset[FileState] = frozenset({
    FileState.TRANSFORM_FAILED,
    FileState.RESOLUTION_FAILED,
    FileState.FILESYSTEM_FAILED,
})


class FileOutcome(BaseModel):
    """Result of running the pipeline once for a single source path.

    ``changed`` is True when anything on disk was written or removed,
    including the declaration stub alone.
    """

    model_config = ConfigDict(frozen=True)

    source_path: Path
    state: FileState
    output_path: Path | None = None
    changed: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.state in FAILED_STATES


class RunTally(BaseModel):
    """Counters for a single batch run. Not persisted."""

    files_count: int = 0
    changed_count: int = 0
    failed_count: int = 0
    failures: list[FileOutcome] = []

    def record(self, outcome: FileOutcome) -> None:
        self.files_count += 1
        if outcome.changed:
            self.changed_count += 1
        if outcome.failed:
            self.failed_count += 1
            self.failures.append(outcome)

    @property
    def succeeded(self) -> bool:
        return self.failed_count == 0
