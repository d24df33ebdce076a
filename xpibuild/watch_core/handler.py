"""Watchdog event handler that forwards source changes to the debouncer."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from xpibuild.config import LOGGER
from .utils import is_within, normalize_path


def proxy_file_changes(
    *,
    artifacts_dir: str | os.PathLike[str],
    on_change: Callable[[Path], Any],
    file_path: str | os.PathLike[str],
) -> bool:
    """Call on_change(file_path) unless the path lies inside artifacts_dir.

    Both paths are normalized (absolute, symlinks resolved) before comparing.
    Returns False when the change was ignored.
    """
    path = normalize_path(file_path)
    if is_within(path, normalize_path(artifacts_dir)):
        LOGGER.debug(f"Ignoring change to: {path}")
        return False
    on_change(path)
    return True


class SourceChangeHandler(FileSystemEventHandler):
    def __init__(self, artifacts_dir: str | os.PathLike[str], on_change: Callable[[Path], Any]):
        super().__init__()
        # Resolved once; the directory may not exist yet
        self.artifacts_dir = normalize_path(artifacts_dir)
        self.on_change = on_change

    def _maybe_trigger(self, src_path: str | bytes) -> bool:
        return proxy_file_changes(
            artifacts_dir=self.artifacts_dir,
            on_change=self.on_change,
            file_path=os.fsdecode(src_path),
        )

    def on_created(self, event: FileSystemEvent) -> None:
        self._maybe_trigger(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        # A directory's mtime changes whenever an entry is added, including
        # the artifacts dir itself appearing inside the source tree.
        if not event.is_directory:
            self._maybe_trigger(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._maybe_trigger(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Moving a source file into the artifacts dir still removes it from
        # the source tree.
        dest = getattr(event, "dest_path", None)
        if dest and self._maybe_trigger(dest):
            return
        self._maybe_trigger(event.src_path)


__all__ = ["SourceChangeHandler", "proxy_file_changes"]
