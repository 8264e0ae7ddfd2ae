"""Build invocation configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BuildConfig(BaseModel):
    """Options for one build invocation (batch or watch).

    ``output_template`` and ``root_template`` are either literal directories
    or start with ``{projectRoot}``. A missing ``root_template`` is derived
    from the first pattern by the configuration guard.
    """

    model_config = ConfigDict(frozen=True)

    patterns: list[str]
    output_template: str = "./bin"
    root_template: str | None = None
    emit_declarations: bool = False
    verbose: bool = False
    watch: bool = False
    marker_file: str = "package.json"
