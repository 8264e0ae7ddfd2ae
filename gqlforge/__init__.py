"""gqlforge: incremental GraphQL-to-JavaScript document generator.

Compiles ``.graphql`` files into importable CommonJS modules (plus optional
``.d.ts`` stubs), writing only files whose content actually changed:
  - Output paths mirror the source tree, optionally anchored at the nearest
    ``{projectRoot}`` (directory holding package.json)
  - Unchanged sources are detected from the source text embedded in the
    previous output, without recompiling
  - One-shot batch builds and a watchdog-driven watch mode
"""

__version__ = "0.1.0"
__description__ = "Incremental GraphQL document to JavaScript module generator"

from gqlforge.core.orchestrator import BuildOrchestrator
from gqlforge.cli.app import app as cli

__all__ = ["BuildOrchestrator", "cli", "__version__"]
