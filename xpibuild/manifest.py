"""Load and validate an extension's manifest.json.

Only the fields packaging depends on are validated: ``name``, ``version`` and
``applications.gecko.id``. Everything else in the manifest is accepted as-is.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from xpibuild.logger import ManifestError, get_logger

logger = get_logger(__name__)

MANIFEST_FILE_NAME = "manifest.json"


class GeckoSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)


class Applications(BaseModel):
    model_config = ConfigDict(extra="allow")

    gecko: GeckoSettings


class RawManifest(BaseModel):
    """The subset of manifest.json that packaging requires."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    applications: Applications


class ManifestInfo(BaseModel):
    """Resolved manifest data; immutable once created."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    application_id: str

    @classmethod
    def from_manifest(cls, data: Mapping[str, Any], *, source: str = MANIFEST_FILE_NAME) -> "ManifestInfo":
        """Validate a raw manifest mapping, raising ManifestError on failure."""
        if not isinstance(data, Mapping):
            raise ManifestError(f"Manifest at {source} is invalid: expected a JSON object")
        try:
            raw = RawManifest.model_validate(dict(data))
        except ValidationError as exc:
            raise ManifestError(
                f"Manifest at {source} is invalid: {_describe_errors(exc)}"
            ) from exc
        return cls(
            name=raw.name,
            version=raw.version,
            application_id=raw.applications.gecko.id,
        )


def _describe_errors(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        if err.get("type") == "missing":
            problems.append(f"missing {loc}")
        else:
            problems.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(problems)


def get_validated_manifest(source_dir: str | Path) -> ManifestInfo:
    """Read <source_dir>/manifest.json and return its validated ManifestInfo."""
    manifest_path = Path(source_dir) / MANIFEST_FILE_NAME
    logger.debug(f"Validating manifest at {manifest_path}")
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestError(f"Could not find {manifest_path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Could not read manifest.json file at {manifest_path}: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Error parsing manifest.json at {manifest_path}: {exc}") from exc

    return ManifestInfo.from_manifest(data, source=str(manifest_path))


def resolve_manifest_data(manifest_data: ManifestInfo | Mapping[str, Any]) -> ManifestInfo:
    """Accept injected manifest data in either resolved or raw form."""
    if isinstance(manifest_data, ManifestInfo):
        return manifest_data
    return ManifestInfo.from_manifest(manifest_data, source="<manifest data>")


__all__ = [
    "MANIFEST_FILE_NAME",
    "ManifestInfo",
    "get_validated_manifest",
    "resolve_manifest_data",
]
