"""Runtime settings — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
GQLFORGE_* environment variables. Per-invocation options (patterns, output
template, ...) live in ``gqlforge.models.config.BuildConfig`` instead.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ForgeSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export GQLFORGE_LOG_LEVEL=DEBUG
        export GQLFORGE_MARKER_FILE=pyproject.toml

    Or via .env file::

        GQLFORGE_DEFAULT_OUTPUT=./generated
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GQLFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Project root discovery
    marker_file: str = "package.json"

    # Generated file layout
    generated_extension: str = ".js"
    declaration_extension: str = ".d.ts"
    default_output: str = "./bin"

    # Watch mode
    watch_poll_interval: float = 1.0


# Module-level singleton — import as `from gqlforge.config import settings`
settings = ForgeSettings()
