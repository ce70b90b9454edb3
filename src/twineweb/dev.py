"""Development-mode route watcher.

Polls the app directory and regenerates routes after a quiet period.
Bursts of edits (an editor saving several files, a ``git checkout``)
coalesce into a single run.  Runs never overlap: the watch loop awaits
each regeneration, and changes seen during a run schedule the next one.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import anyio
import anyio.to_thread

from twineweb.errors import TwineError

logger = logging.getLogger("twineweb.dev")

# path -> mtime_ns
Snapshot: TypeAlias = dict[str, int]


def is_watched_file(path: str | Path) -> bool:
    return Path(path).suffix == ".py"


def snapshot(app_dir: str | Path, *, ignore: frozenset[str] = frozenset()) -> Snapshot:
    """Record the mtime of every directory and ``.py`` file under *app_dir*.

    Directories are recorded by presence only (mtime ``0``) so that
    creating or removing an empty ``[param]`` folder is noticed while the
    temporary files of an atomic write are not.  Files named in *ignore*
    (the generated module) are skipped so a regeneration does not
    trigger itself.
    """
    state: Snapshot = {}
    for dirpath, dirnames, filenames in os.walk(app_dir):
        dirnames[:] = [d for d in dirnames if d != "__pycache__" and not d.startswith(".")]
        state[dirpath] = 0
        for name in filenames:
            path = os.path.join(dirpath, name)
            if not is_watched_file(name) or path in ignore:
                continue
            try:
                state[path] = os.stat(path).st_mtime_ns
            except FileNotFoundError:
                continue
    return state


class Debouncer:
    """Tracks pending changes and decides when a run is due.

    Time is passed in explicitly so the logic stays independent of the
    clock that drives it.
    """

    __slots__ = ("_last_change", "window")

    def __init__(self, window: float) -> None:
        self.window = window
        self._last_change: float | None = None

    @property
    def pending(self) -> bool:
        return self._last_change is not None

    def notify(self, now: float) -> None:
        """Record a change; restarts the quiet window."""
        self._last_change = now

    def due(self, now: float) -> bool:
        """True once the window has passed with no further change."""
        return self._last_change is not None and now - self._last_change >= self.window

    def clear(self) -> None:
        self._last_change = None


class RouteWatcher:
    """Regenerates routes whenever files under the app directory change.

    Args:
        regenerate: Blocking callable running the full pipeline.  Executed
            in a worker thread.
        app_dir: Directory to watch.
        debounce: Seconds of quiet before a run.
        poll_interval: Seconds between snapshots.
        ignore: Paths excluded from change detection.
    """

    def __init__(
        self,
        regenerate: Callable[[], object],
        app_dir: str | Path,
        *,
        debounce: float = 0.5,
        poll_interval: float = 0.25,
        ignore: tuple[str | Path, ...] = (),
    ) -> None:
        self.regenerate = regenerate
        self.app_dir = Path(app_dir)
        self.poll_interval = poll_interval
        self.ignore = frozenset(str(p) for p in ignore)
        self.debouncer = Debouncer(debounce)
        self.runs = 0

    def take_snapshot(self) -> Snapshot:
        return snapshot(self.app_dir, ignore=self.ignore)

    async def run_once(self) -> bool:
        """Run the pipeline once; returns False if it failed.

        Pipeline errors are logged, not raised, so one bad save does not
        stop the watcher.
        """
        logger.info("App directory changed, regenerating routes...")
        self.runs += 1
        try:
            await anyio.to_thread.run_sync(self.regenerate)
        except TwineError as exc:
            logger.error("Failed to regenerate routes: %s", exc)
            return False
        logger.info("Routes regenerated")
        return True

    async def run(self, *, max_runs: int | None = None) -> None:
        """Watch until cancelled, or until *max_runs* regenerations finished."""
        previous = await anyio.to_thread.run_sync(self.take_snapshot)
        logger.info("Watching %s for changes", self.app_dir)

        while max_runs is None or self.runs < max_runs:
            await anyio.sleep(self.poll_interval)
            current = await anyio.to_thread.run_sync(self.take_snapshot)
            now = anyio.current_time()

            if current != previous:
                previous = current
                self.debouncer.notify(now)
                continue

            if self.debouncer.due(now):
                self.debouncer.clear()
                await self.run_once()
