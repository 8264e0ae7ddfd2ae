"""Watchdog-based file-system watcher for source patterns.

Events are delivered by the watchdog observer thread one at a time; each one
is run through the listener to completion before the next is dispatched, so
for a given path a later event always sees the files left by the earlier one.
Paths inside dot-directories and dotfiles are ignored.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import time
from collections.abc import Callable
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from gqlforge.core.paths import glob_parent

logger = logging.getLogger(__name__)


def _split(path: str) -> list[str]:
    return [part for part in path.replace("\\", "/").split("/") if part]


def _match_parts(parts: list[str], pattern: list[str]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        for i in range(len(parts) + 1):
            if _match_parts(parts[i:], rest):
                return True
            if i < len(parts) and parts[i].startswith("."):
                return False
        return False
    if not parts:
        return False
    if parts[0].startswith(".") and not head.startswith("."):
        return False
    return fnmatch.fnmatchcase(parts[0], head) and _match_parts(parts[1:], rest)


class PatternMatcher:
    """Matches absolute file paths against glob patterns.

    ``*`` and ``?`` never cross a directory separator, ``**`` spans zero or
    more directories, and wildcards do not match dotfiles or dot-directories.
    """

    def __init__(self, patterns: list[str], cwd: str | None = None) -> None:
        base = cwd or os.getcwd()
        self._patterns = [
            _split(os.path.normpath(os.path.join(base, pattern))) for pattern in patterns
        ]

    def matches(self, path: str) -> bool:
        parts = _split(os.path.abspath(path))
        return any(_match_parts(parts, pattern) for pattern in self._patterns)


def watch_roots(patterns: list[str]) -> list[str]:
    """Directories to observe recursively, one per distinct glob parent.

    Missing directories are replaced by their nearest existing ancestor and
    directories nested inside another root are dropped.
    """
    candidates = set()
    for pattern in patterns:
        directory = os.path.abspath(glob_parent(pattern))
        while not os.path.isdir(directory) and os.path.dirname(directory) != directory:
            directory = os.path.dirname(directory)
        candidates.add(directory)

    roots: list[str] = []
    for directory in sorted(candidates, key=len):
        if any(directory == root or directory.startswith(root.rstrip(os.sep) + os.sep)
               for root in roots):
            continue
        roots.append(directory)
    return roots


class SourceEventHandler(FileSystemEventHandler):
    """Routes watchdog file events for matching paths to a listener.

    Created, modified and deleted files are all handed to the listener; the
    listener decides what to do by looking at the file system. A move is a
    deletion of the old path plus a creation of the new one.
    """

    def __init__(self, matcher: PatternMatcher, listener: Callable[[str], Any]) -> None:
        super().__init__()
        self._matcher = matcher
        self._listener = listener

    def _handle(self, path: str | bytes) -> None:
        path = os.fsdecode(path)
        if not self._matcher.matches(path):
            return
        try:
            self._listener(path)
        except Exception:
            # Keep the observer thread alive for subsequent events.
            logger.exception("Unhandled error while processing %s", path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(event.src_path)
            self._handle(event.dest_path)


class SourceWatcher:
    """Observes the directories behind a set of glob patterns.

    Parameters
    ----------
    patterns:
        Source glob patterns, as passed on the command line.
    listener:
        Called with the path of every matching created, changed or deleted
        file.
    observer_factory:
        Builds the watchdog observer. Tests substitute a fake.
    """

    def __init__(
        self,
        patterns: list[str],
        listener: Callable[[str], Any],
        *,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self.patterns = list(patterns)
        self.handler = SourceEventHandler(PatternMatcher(self.patterns), listener)
        self._observer = observer_factory()
        self._started = False

    def start(self) -> list[str]:
        """Schedule the watches and start the observer. Returns the watched roots."""
        roots = watch_roots(self.patterns)
        for root in roots:
            self._observer.schedule(self.handler, root, recursive=True)
            logger.debug("Watching %s", root)
        self._observer.start()
        self._started = True
        return roots

    def stop(self) -> None:
        if self._started:
            self._observer.stop()
            self._observer.join()
            self._started = False

    def serve_forever(self, poll_interval: float = 1.0) -> None:
        """Block until interrupted, then stop the observer."""
        if not self._started:
            self.start()
        try:
            while self._observer.is_alive():
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            logger.info("Watch interrupted, shutting down")
        finally:
            self.stop()
