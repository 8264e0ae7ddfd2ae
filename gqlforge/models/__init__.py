"""gqlforge data models — all Pydantic v2."""

from gqlforge.models.config import BuildConfig
from gqlforge.models.outcomes import FAILED_STATES, FileOutcome, FileState, RunTally

__all__ = [
    # config
    "BuildConfig",
    # outcomes
    "FileState",
    "FAILED_STATES",
    "FileOutcome",
    "RunTally",
]
