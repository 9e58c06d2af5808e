"""Config watcher: reloads the logging backend when its config file changes."""

import os
import time
import logging

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.5


class ConfigWatcher(FileSystemEventHandler):
    """Watches one config file and calls on_change(path) when it is written or replaced."""

    def __init__(self, config_path, on_change):
        super().__init__()
        self._path = os.path.abspath(os.fspath(config_path))
        self._on_change = on_change
        self._last_change = 0.0
        self._observer = None

    @property
    def path(self):
        return self._path

    @property
    def running(self):
        return self._observer is not None

    def on_modified(self, event):
        if not event.is_directory:
            self._handle(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event):
        # Editors often save by renaming a temporary file over the original
        if not event.is_directory:
            self._handle(event.dest_path)

    def _handle(self, changed_path):
        """Debounce and forward changes of the watched file."""
        if os.path.abspath(os.fsdecode(changed_path)) != self._path:
            return

        now = time.monotonic()
        if now - self._last_change < DEBOUNCE_SECONDS:
            return
        self._last_change = now

        logger.debug(f"Config file changed: {self._path}")
        self._on_change(self._path)

    def start(self):
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self, os.path.dirname(self._path), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.debug(f"Watching config file: {self._path}")

    def stop(self):
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
