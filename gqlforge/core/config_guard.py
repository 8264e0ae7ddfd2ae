"""Startup configuration guard.

Runs once before any file is processed and fails hard (raises
``ConfigurationError``) if the build cannot be set up. The caller is expected
to report the error and exit; no files are touched.
"""

from __future__ import annotations

import logging

from gqlforge.core.paths import glob_parent
from gqlforge.models.config import BuildConfig

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when the build configuration is unusable."""


def validate_build_config(config: BuildConfig) -> BuildConfig:
    """Validate *config* and fill in a derived root template.

    Constraints enforced
    --------------------
    1. At least one non-empty glob pattern.
    2. A non-empty output template.
    3. A root template, either given or derived from the first pattern's
       static prefix.

    Returns the config with ``root_template`` set.

    Raises
    ------
    ConfigurationError
        If any constraint is violated.
    """
    patterns = [p for p in config.patterns if p]
    if not patterns:
        raise ConfigurationError("At least one source glob pattern is required.")

    if not config.output_template:
        raise ConfigurationError("Must provide output folder!")

    root_template = config.root_template or glob_parent(patterns[0])
    if not root_template:
        raise ConfigurationError(
            "Root path not provided and could not be derived from input glob!"
        )

    if root_template != config.root_template:
        logger.debug("Derived root %r from pattern %r", root_template, patterns[0])

    return config.model_copy(update={"patterns": patterns, "root_template": root_template})
