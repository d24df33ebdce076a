"""Shared helpers for CLI commands."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from xpibuild.logger import UsageError


def output_json(data: Any) -> None:
    """Write JSON to stdout; the single output path for all commands."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def resolve_source_dir(path: str | None) -> Path:
    """Resolve --source-dir (default: cwd), requiring an existing directory."""
    root = Path(path or ".").expanduser().resolve()
    if not root.is_dir():
        raise UsageError(f"Source directory {root} does not exist or is not a directory")
    return root
