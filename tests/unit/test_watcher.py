"""Tests for the watchdog-based source watcher."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from gqlforge.core.watcher import PatternMatcher, SourceEventHandler, SourceWatcher, watch_roots


class FakeObserver:
    """Records scheduling calls; never spawns a thread."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[Any, str, bool]] = []
        self.started = False
        self.stopped = False
        self.joined = False
        self.alive_checks = 0

    def schedule(self, handler: Any, path: str, recursive: bool = False) -> None:
        self.scheduled.append((handler, path, recursive))

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def join(self) -> None:
        self.joined = True

    def is_alive(self) -> bool:
        self.alive_checks += 1
        if self.alive_checks > 1:
            raise KeyboardInterrupt
        return True


# ---------------------------------------------------------------------------
# Test: pattern matching
# ---------------------------------------------------------------------------


class TestPatternMatcher:
    def test_double_star_spans_directories(self, tmp_path: Path):
        matcher = PatternMatcher(["src/**/*.graphql"], cwd=str(tmp_path))
        assert matcher.matches(str(tmp_path / "src" / "q.graphql"))
        assert matcher.matches(str(tmp_path / "src" / "a" / "b" / "q.graphql"))

    def test_single_star_stays_in_directory(self, tmp_path: Path):
        matcher = PatternMatcher(["src/*.graphql"], cwd=str(tmp_path))
        assert matcher.matches(str(tmp_path / "src" / "q.graphql"))
        assert not matcher.matches(str(tmp_path / "src" / "a" / "q.graphql"))

    def test_extension_mismatch(self, tmp_path: Path):
        matcher = PatternMatcher(["src/**/*.graphql"], cwd=str(tmp_path))
        assert not matcher.matches(str(tmp_path / "src" / "q.graphql.js"))

    def test_dotfiles_and_dot_directories_ignored(self, tmp_path: Path):
        matcher = PatternMatcher(["src/**/*.graphql"], cwd=str(tmp_path))
        assert not matcher.matches(str(tmp_path / "src" / ".q.graphql"))
        assert not matcher.matches(str(tmp_path / "src" / ".cache" / "q.graphql"))

    def test_literal_dot_directory_in_prefix(self, tmp_path: Path):
        matcher = PatternMatcher([".config/*.graphql"], cwd=str(tmp_path))
        assert matcher.matches(str(tmp_path / ".config" / "q.graphql"))

    def test_absolute_pattern(self, tmp_path: Path):
        matcher = PatternMatcher([str(tmp_path / "**" / "*.gql")])
        assert matcher.matches(str(tmp_path / "x" / "q.gql"))


class TestWatchRoots:
    def test_nested_roots_collapsed(self, tmp_path: Path):
        (tmp_path / "src" / "sub").mkdir(parents=True)
        roots = watch_roots([
            str(tmp_path / "src" / "**" / "*.graphql"),
            str(tmp_path / "src" / "sub" / "*.graphql"),
        ])
        assert roots == [str(tmp_path / "src")]

    def test_missing_directory_uses_existing_ancestor(self, tmp_path: Path):
        roots = watch_roots([str(tmp_path / "not" / "yet" / "*.graphql")])
        assert roots == [str(tmp_path)]


# ---------------------------------------------------------------------------
# Test: event routing
# ---------------------------------------------------------------------------


class TestSourceEventHandler:
    def _handler(self, tmp_path: Path) -> tuple[SourceEventHandler, list[str]]:
        seen: list[str] = []
        matcher = PatternMatcher([str(tmp_path / "**" / "*.graphql")])
        return SourceEventHandler(matcher, seen.append), seen

    def test_created_modified_deleted(self, tmp_path: Path):
        handler, seen = self._handler(tmp_path)
        path = str(tmp_path / "q.graphql")
        handler.dispatch(FileCreatedEvent(path))
        handler.dispatch(FileModifiedEvent(path))
        handler.dispatch(FileDeletedEvent(path))
        assert seen == [path, path, path]

    def test_moved_handles_both_paths(self, tmp_path: Path):
        handler, seen = self._handler(tmp_path)
        old, new = str(tmp_path / "old.graphql"), str(tmp_path / "new.graphql")
        handler.dispatch(FileMovedEvent(old, new))
        assert seen == [old, new]

    def test_directory_and_unmatched_events_ignored(self, tmp_path: Path):
        handler, seen = self._handler(tmp_path)
        handler.dispatch(DirCreatedEvent(str(tmp_path / "dir.graphql")))
        handler.dispatch(FileCreatedEvent(str(tmp_path / "q.txt")))
        assert seen == []

    def test_listener_error_does_not_stop_later_events(self, tmp_path: Path):
        seen: list[str] = []

        def _listener(path: str) -> None:
            if path.endswith("bad.graphql"):
                raise RuntimeError("boom")
            seen.append(path)

        handler = SourceEventHandler(PatternMatcher([str(tmp_path / "*.graphql")]), _listener)
        handler.dispatch(FileCreatedEvent(str(tmp_path / "bad.graphql")))
        handler.dispatch(FileCreatedEvent(str(tmp_path / "good.graphql")))
        assert seen == [str(tmp_path / "good.graphql")]


# ---------------------------------------------------------------------------
# Test: watcher lifecycle
# ---------------------------------------------------------------------------


class TestSourceWatcher:
    def test_start_schedules_recursive_watch(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        observer = FakeObserver()
        watcher = SourceWatcher(
            [str(tmp_path / "src" / "**" / "*.graphql")],
            lambda path: None,
            observer_factory=lambda: observer,
        )
        roots = watcher.start()

        assert roots == [str(tmp_path / "src")]
        assert observer.started is True
        (handler, path, recursive), = observer.scheduled
        assert handler is watcher.handler
        assert path == str(tmp_path / "src")
        assert recursive is True

    def test_serve_forever_stops_on_interrupt(self, tmp_path: Path):
        observer = FakeObserver()
        watcher = SourceWatcher(
            [str(tmp_path / "*.graphql")], lambda path: None, observer_factory=lambda: observer
        )
        watcher.serve_forever(poll_interval=0)

        assert observer.started is True
        assert observer.stopped is True
        assert observer.joined is True
