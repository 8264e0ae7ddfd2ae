"""Incremental build engine: path resolution, change detection, writes, orchestration."""

from gqlforge.core.compiler import TransformError, compile_document
from gqlforge.core.config_guard import ConfigurationError, validate_build_config
from gqlforge.core.fingerprint import needs_regeneration, serialize_source
from gqlforge.core.orchestrator import BuildOrchestrator, OutputCollisionError
from gqlforge.core.paths import ResolutionError, resolve_output_path
from gqlforge.core.writer import ArtifactWriter

__all__ = [
    "ArtifactWriter",
    "BuildOrchestrator",
    "ConfigurationError",
    "OutputCollisionError",
    "ResolutionError",
    "TransformError",
    "compile_document",
    "needs_regeneration",
    "resolve_output_path",
    "serialize_source",
    "validate_build_config",
]
