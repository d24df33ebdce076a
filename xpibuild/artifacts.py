"""Preparation of the directory packaged extensions are written to."""
from __future__ import annotations

import os
from pathlib import Path

from xpibuild.logger import PackageIOError, get_logger

logger = get_logger(__name__)


def prepare_artifacts_dir(artifacts_dir: str | Path) -> Path:
    """Create artifacts_dir (recursively) if missing and check it is writable."""
    path = Path(artifacts_dir)
    if path.exists():
        if not path.is_dir():
            raise PackageIOError(f"Artifacts path {path} exists but is not a directory")
        if not os.access(path, os.W_OK | os.X_OK):
            raise PackageIOError(f"Artifacts directory {path} is not writable")
        logger.debug(f"Using existing artifacts directory {path}")
        return path

    logger.debug(f"Creating artifacts directory: {path}")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PackageIOError(f"Could not create artifacts directory {path}: {exc}") from exc
    return path


__all__ = ["prepare_artifacts_dir"]
