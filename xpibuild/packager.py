"""
packager.py

Responsibility: turn a source directory into one ``.xpi`` file.

Each call to ``Packager.produce_artifact`` is an independent pass:
resolve manifest -> prepare artifacts dir -> archive -> name -> write.
Nothing is cached between passes.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from xpibuild.artifacts import prepare_artifacts_dir
from xpibuild.file_filter import FileFilter
from xpibuild.logger import PackageIOError, get_logger
from xpibuild.manifest import ManifestInfo, get_validated_manifest, resolve_manifest_data
from xpibuild.zip_dir import zip_dir

logger = get_logger(__name__)

_UNSAFE_RUN = re.compile(r"[^a-z0-9.-]+")


@dataclass(frozen=True)
class PackagingResult:
    artifact_path: Path


def safe_file_name(name: str) -> str:
    """Lower-case name and collapse each run of chars outside [a-z0-9.-] to '_'."""
    return _UNSAFE_RUN.sub("_", name.lower())


def package_file_name(manifest: ManifestInfo) -> str:
    return safe_file_name(f"{manifest.name}-{manifest.version}.xpi")


def write_artifact(path: Path, data: bytes) -> None:
    """Write data to path, overwriting; returns only after flush + fsync + close."""
    try:
        with open(path, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
    except OSError as exc:
        raise PackageIOError(f"Could not write {path}: {exc}") from exc


class Packager:
    """Builds the extension archive for one source directory."""

    def __init__(
        self,
        source_dir: str | Path,
        artifacts_dir: str | Path,
        *,
        file_filter: Optional[FileFilter] = None,
        manifest_data: ManifestInfo | Mapping[str, Any] | None = None,
        archive: Callable[..., bytes] = zip_dir,
    ):
        self.source_dir = Path(source_dir)
        self.artifacts_dir = Path(artifacts_dir)
        self.file_filter = file_filter if file_filter is not None else FileFilter()
        self.manifest_data = (
            resolve_manifest_data(manifest_data) if manifest_data is not None else None
        )
        self._archive = archive

    def resolve_manifest(self) -> ManifestInfo:
        if self.manifest_data is not None:
            logger.debug(f"Using manifest id={self.manifest_data.application_id}")
            return self.manifest_data
        return get_validated_manifest(self.source_dir)

    def produce_artifact(self) -> PackagingResult:
        manifest = self.resolve_manifest()
        prepare_artifacts_dir(self.artifacts_dir)

        data = self._archive(self.source_dir, filter=self.file_filter.want_file)

        extension_path = self.artifacts_dir / package_file_name(manifest)
        write_artifact(extension_path, data)

        logger.info(f"Your web extension is ready: {extension_path}")
        return PackagingResult(artifact_path=extension_path)


__all__ = [
    "Packager",
    "PackagingResult",
    "package_file_name",
    "safe_file_name",
    "write_artifact",
]
