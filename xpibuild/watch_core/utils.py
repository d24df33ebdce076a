"""Misc utilities shared across watch_core modules."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Type

from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from xpibuild.config import LOGGER


def create_observer(use_polling: bool, observer_cls: Type[BaseObserver] = Observer) -> BaseObserver:
    """Create a watchdog observer based on configuration."""
    if use_polling:
        from watchdog.observers.polling import PollingObserver

        LOGGER.info("Using polling observer for filesystem events")
        return PollingObserver()
    return observer_cls()


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Absolute path with symlinks resolved where possible.

    Paths that no longer exist (deleted files) are resolved as far as the
    filesystem allows, which still resolves their existing parents.
    """
    p = Path(os.fsdecode(path)).expanduser()
    try:
        return p.resolve(strict=False)
    except (OSError, RuntimeError):
        return Path(os.path.abspath(p))


def is_within(path: Path, directory: Path) -> bool:
    """True if path is directory itself or lies below it."""
    return path == directory or path.is_relative_to(directory)


__all__ = ["create_observer", "is_within", "normalize_path"]
