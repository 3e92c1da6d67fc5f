"""
Change detection for the config document.

The document can be edited by hand while the catalog is in use. A watchdog
observer watches the document's directory and fires callbacks when the
document is created, modified, replaced or removed. Callbacks run on the
observer thread; the host hands the refresh over to its own event loop.
Unsaved in-memory changes are not merged: the last writer wins.
"""

import os
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


class ConfigEventHandler(FileSystemEventHandler):
    """Forwards events that touch the config file to its watcher."""

    def __init__(self, watcher: "ConfigWatcher"):
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent):
        if event.is_directory:
            return
        # Saves replace the file, which arrives as a move onto it
        paths = (event.src_path, getattr(event, "dest_path", "") or "")
        if any(os.path.basename(os.fsdecode(p)) == self.watcher.path.name for p in paths if p):
            self.watcher.check()


class ConfigWatcher:
    """
    Watches one file and fires callbacks when its contents change.

    Args:
        path: The config document.
        on_change: Optional first callback.
    """

    def __init__(self, path: Path, on_change: Callable[[], None] | None = None):
        self.path = Path(path)
        self._callbacks: list[Callable[[], None]] = [on_change] if on_change else []
        self._lock = threading.Lock()
        self._signature = self._read_signature()
        self.observer = None

    def _read_signature(self) -> tuple[int, int] | None:
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def add_callback(self, callback: Callable[[], None]):
        self._callbacks.append(callback)

    def mark_seen(self):
        """Record the current state as known, e.g. after our own save."""
        with self._lock:
            self._signature = self._read_signature()

    def check(self) -> bool:
        """
        Compare the file against the last known state.

        Several events can arrive for one write; only the first one that
        sees new contents fires the callbacks.

        Returns:
            True if the file changed; callbacks have then been fired.
        """
        with self._lock:
            signature = self._read_signature()
            if signature == self._signature:
                return False
            self._signature = signature

        for callback in list(self._callbacks):
            callback()
        return True

    def start(self):
        """Start watching in a background thread."""
        if self.observer is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.observer = Observer()
        self.observer.schedule(ConfigEventHandler(self), str(self.path.parent), recursive=False)
        self.observer.start()

    def stop(self):
        """Stop watching and wait for the observer thread to exit."""
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join()
        self.observer = None

    def __enter__(self) -> "ConfigWatcher":
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()
