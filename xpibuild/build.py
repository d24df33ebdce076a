"""
build.py

Responsibility: run one packaging pass and, in watch mode, keep rebuilding.

High-level flow:
1) Package once; any failure propagates to the caller
2) If ``config.watch``: start the source watcher with the same packaging
   function and return immediately; the watcher runs in the background
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from xpibuild.config import BuildConfig
from xpibuild.logger import get_logger

log = get_logger(__name__)


@dataclass
class BuildOutcome:
    """Result of the first pass, plus the watch handle in watch mode."""

    result: Any
    watcher: Optional[Any] = None


def build(config: BuildConfig) -> BuildOutcome:
    log.info(f"Building web extension from {config.source_dir}")

    result = config.create_package()

    watcher = None
    if config.watch:
        log.info("Rebuilding when files change...")
        watcher = config.on_source_change(
            source_dir=config.source_dir,
            artifacts_dir=config.artifacts_dir,
            on_change=config.create_package,
            debounce_secs=config.debounce_secs,
            use_polling=config.use_polling,
        )
    return BuildOutcome(result=result, watcher=watcher)


__all__ = ["BuildOutcome", "build"]
