"""Shared configuration: environment settings and the build configuration object."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from xpibuild.file_filter import FileFilter
from xpibuild.logger import get_logger, safe_bool, safe_float
from xpibuild.manifest import ManifestInfo, resolve_manifest_data

LOGGER = get_logger("xpibuild.watch")

# Leading-edge debounce window for file system events
DELAY_SECS = safe_float(
    os.environ.get("XPIBUILD_DEBOUNCE_SECS"), 1.0, LOGGER, "XPIBUILD_DEBOUNCE_SECS"
)
# Polling is needed on network disks where native notifications do not arrive
USE_POLLING = safe_bool(os.environ.get("WATCH_USE_POLLING"), False, LOGGER, "WATCH_USE_POLLING")

DEFAULT_ARTIFACTS_DIR_NAME = "web-ext-artifacts"


def default_artifacts_dir() -> Path:
    return Path.cwd() / DEFAULT_ARTIFACTS_DIR_NAME


@dataclass
class BuildConfig:
    """Everything a build needs; defaults are filled in at construction.

    ``on_source_change`` receives ``source_dir``, ``artifacts_dir`` and
    ``on_change`` keyword arguments (plus ``debounce_secs``/``use_polling``)
    and returns a handle with ``close()``. ``create_package`` replaces the
    packaging pass entirely and must return a ``PackagingResult``.
    """

    source_dir: Path = field(default_factory=Path.cwd)
    artifacts_dir: Path = field(default_factory=default_artifacts_dir)
    watch: bool = False
    manifest_data: Optional[ManifestInfo | Mapping[str, Any]] = None
    file_filter: Optional[FileFilter] = None
    on_source_change: Optional[Callable[..., Any]] = None
    create_package: Optional[Callable[[], Any]] = None
    debounce_secs: float = DELAY_SECS
    use_polling: bool = USE_POLLING

    def __post_init__(self) -> None:
        self.source_dir = Path(self.source_dir).expanduser().absolute()
        self.artifacts_dir = Path(self.artifacts_dir).expanduser().absolute()
        if self.manifest_data is not None:
            self.manifest_data = resolve_manifest_data(self.manifest_data)
        if self.file_filter is None:
            self.file_filter = FileFilter()
        if self.on_source_change is None:
            from xpibuild.watcher import on_source_change

            self.on_source_change = on_source_change
        if self.create_package is None:
            from xpibuild.packager import Packager

            self.create_package = Packager(
                self.source_dir,
                self.artifacts_dir,
                file_filter=self.file_filter,
                manifest_data=self.manifest_data,
            ).produce_artifact


__all__ = [
    "BuildConfig",
    "DEFAULT_ARTIFACTS_DIR_NAME",
    "DELAY_SECS",
    "LOGGER",
    "USE_POLLING",
    "default_artifacts_dir",
]
