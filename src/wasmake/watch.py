# watch.py
from __future__ import annotations

import os
import queue
import threading
import time
from enum import Enum
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Callable, Dict, List

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import WasmakeError
from .model import WatchSpec
from .ui.console import Console, get_console

# Queue sentinel: stop the loop
_STOP = object()

# Event types that don't mean the tree changed
_IGNORED_EVENT_TYPES = {"opened", "closed", "closed_no_write"}


class WatchState(str, Enum):
    IDLE = "idle"
    WATCHING = "watching"
    RUNNING = "running"
    CANCELLED = "cancelled"


class _ChangeHandler(FileSystemEventHandler):
    """Forwards watchdog events to the trigger (runs on the observer thread)."""

    def __init__(self, trigger: "WatchTrigger"):
        super().__init__()
        self.trigger = trigger

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _IGNORED_EVENT_TYPES:
            return
        # a child's own event already names the changed path
        if event.is_directory and event.event_type == "modified":
            return

        paths = [os.fsdecode(event.src_path)]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(os.fsdecode(dest))

        if event.is_directory:
            if event.event_type == "created":
                self.trigger.add_directory(paths[0])
            elif event.event_type == "moved":
                self.trigger.remove_directory(paths[0])
                self.trigger.add_directory(paths[1])
            elif event.event_type == "deleted":
                self.trigger.remove_directory(paths[0])

        for path in paths:
            self.trigger.notify(path)


class WatchTrigger:
    """
    Re-runs a task whenever something under `spec.root` changes.

    Observer thread -> notify() -> queue -> step() on the caller's thread.
    At most one run is in flight; changes seen while running set a single
    pending flag, so N events during a run cause exactly one re-run.
    """

    def __init__(
        self,
        spec: WatchSpec,
        on_change: Callable[[], Any],
        *,
        project_root: str | Path = ".",
        observer_factory: Callable[[], Any] = Observer,
        debounce: float = 0.2,
        console: Console | None = None,
    ):
        self.spec = spec
        self.on_change = on_change
        self.root = (Path(project_root) / spec.root).resolve()
        self.debounce = debounce
        self.console = console or get_console()
        self.runs = 0

        self._observer_factory = observer_factory
        self._observer: Any = None
        self._handler = _ChangeHandler(self)
        self._watches: Dict[str, Any] = {}

        self._events: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._state = WatchState.IDLE
        self._pending = False
        self._pending_paths: List[str] = []

    @property
    def state(self) -> WatchState:
        return self._state

    # ---- filtering ----
    def relative(self, path: str | Path) -> str | None:
        """Root-relative POSIX path, or None when outside the watched root."""
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        rel = os.path.relpath(os.path.realpath(p), self.root)
        if rel == ".." or rel.startswith(".." + os.sep):
            return None
        return Path(rel).as_posix()

    def is_excluded(self, path: str | Path) -> bool:
        rel = self.relative(path)
        if rel is None:
            return True
        if rel == ".":
            return False

        parts = rel.split("/")
        candidates = ["/".join(parts[: i + 1]) for i in range(len(parts))]
        for pattern in self.spec.exclude:
            for cand in candidates:
                if fnmatch(cand, pattern) or fnmatch(cand + "/", pattern):
                    return True
        return False

    # ---- registration ----
    def add_directory(self, path: str | Path) -> None:
        """Watch `path` and every non-excluded directory below it."""
        if self._observer is None or self.is_excluded(path):
            return
        for dirpath, dirnames, _files in os.walk(path):
            # prune excluded subtrees so they are never traversed
            dirnames[:] = [d for d in dirnames if not self.is_excluded(os.path.join(dirpath, d))]
            key = os.path.abspath(dirpath)
            if key not in self._watches:
                self._watches[key] = self._observer.schedule(self._handler, key, recursive=False)

    def remove_directory(self, path: str | Path) -> None:
        prefix = os.path.abspath(path)
        for key in [k for k in self._watches if k == prefix or k.startswith(prefix + os.sep)]:
            watch = self._watches.pop(key)
            try:
                self._observer.unschedule(watch)
            except KeyError:
                # emitter already gone with the directory
                pass

    def start(self) -> None:
        """IDLE -> WATCHING: register the tree and start the observer."""
        self._observer = self._observer_factory()
        self.add_directory(self.root)
        self._observer.start()
        with self._lock:
            if self._state is WatchState.IDLE:
                self._state = WatchState.WATCHING
        self.console.print_watch_started(
            root=str(self.root),
            exclude=self.spec.exclude,
            on_change=self.spec.on_change,
        )

    # ---- event intake (observer thread) ----
    def notify(self, path: str | Path) -> bool:
        """Record a change; returns False when the path is ignored."""
        if self.is_excluded(path):
            return False
        rel = self.relative(path) or str(path)
        if rel == ".":
            return False
        with self._lock:
            if self._state is WatchState.CANCELLED:
                return False
            if self._state is WatchState.RUNNING:
                self._pending = True
                self._pending_paths.append(rel)
            else:
                self._events.put(rel)
        return True

    def _drain(self) -> List[object]:
        items: List[object] = []
        while True:
            try:
                items.append(self._events.get_nowait())
            except queue.Empty:
                return items

    # ---- run loop (caller thread) ----
    def _run_once(self, paths: List[str]) -> None:
        self.console.print_watch_triggered(paths)
        try:
            self.on_change()
        except WasmakeError as e:
            # a broken run must not end the watch
            self.console.print_exception(e)
        self.runs += 1

    def step(self, timeout: float | None = None) -> bool:
        """
        Wait for one change and run the task (plus at most one re-run).

        Returns False once the trigger is cancelled.
        """
        try:
            first = self._events.get(timeout=timeout)
        except queue.Empty:
            return self._state is not WatchState.CANCELLED
        if first is _STOP:
            return False

        if self.debounce:
            time.sleep(self.debounce)

        with self._lock:
            if self._state is WatchState.CANCELLED:
                return False
            self._state = WatchState.RUNNING
        # events queued before RUNNING belong to this run
        items = [first] + self._drain()
        if _STOP in items:
            return False
        paths = sorted({str(p) for p in items})

        while True:
            self._run_once(paths)
            with self._lock:
                if self._state is WatchState.CANCELLED:
                    return False
                if not self._pending:
                    self._state = WatchState.WATCHING
                    break
                self._pending = False
                paths = sorted(set(self._pending_paths))
                self._pending_paths = []

        self.console.print_watch_waiting()
        return True

    def cancel(self) -> None:
        """Any state -> CANCELLED; the loop exits after the current run."""
        with self._lock:
            self._state = WatchState.CANCELLED
            self._pending = False
        self._events.put(_STOP)

    def _shutdown(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self._watches.clear()

    def stop(self) -> None:
        """Cancel and stop the observer thread."""
        self.cancel()
        self._shutdown()

    def run(self) -> None:
        """Block until cancelled (cancel() or Ctrl-C)."""
        self.start()
        try:
            while self.step():
                pass
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
            self.console.print_watch_stopped()
