"""Shared test fixtures for gqlforge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from gqlforge.config import ForgeSettings
from gqlforge.core.orchestrator import BuildOrchestrator
from gqlforge.core.writer import ArtifactWriter
from gqlforge.models.config import BuildConfig


@pytest.fixture
def settings() -> ForgeSettings:
    """Provide settings with the stock defaults, ignoring any .env file."""
    return ForgeSettings(_env_file=None)


@pytest.fixture
def writer() -> ArtifactWriter:
    """Provide a quiet ArtifactWriter."""
    return ArtifactWriter()


@pytest.fixture
def write_source() -> Callable[[Path, str], Path]:
    """Factory fixture: write a UTF-8 source file, creating parent dirs."""

    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def project(tmp_path: Path, write_source: Callable[[Path, str], Path]) -> Path:
    """A project tree with a package.json marker and one query under src/."""
    write_source(tmp_path / "package.json", "{}\n")
    write_source(tmp_path / "src" / "q.graphql", "query { id }\n")
    return tmp_path


@pytest.fixture
def make_orchestrator(
    settings: ForgeSettings,
) -> Callable[..., BuildOrchestrator]:
    """Factory fixture: build an orchestrator over a project directory."""

    def _factory(
        base: Path,
        *,
        patterns: list[str] | None = None,
        output_template: str | None = None,
        root_template: str | None = None,
        **overrides: Any,
    ) -> BuildOrchestrator:
        transform = overrides.pop("transform", None)
        config = BuildConfig(
            patterns=patterns or [str(base / "src" / "**" / "*.graphql")],
            output_template=output_template or str(base / "out"),
            root_template=root_template or str(base / "src"),
            **overrides,
        )
        kwargs: dict[str, Any] = {"writer": ArtifactWriter(), "settings": settings}
        if transform is not None:
            kwargs["transform"] = transform
        return BuildOrchestrator(config, **kwargs)

    return _factory
