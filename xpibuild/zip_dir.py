#!/usr/bin/env python3
"""
zip_dir.py - Archive a directory tree into an in-memory ZIP.

Entries are written in sorted order with a fixed timestamp and fixed
permissions, so the same tree and filter always yield the same bytes.
"""
from __future__ import annotations

import io
import os
import zipfile
from pathlib import Path
from typing import Callable, Iterator, List

from xpibuild.logger import PackageIOError, get_logger

logger = get_logger(__name__)

# Earliest timestamp the ZIP format can represent
FIXED_ZIP_DT = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o100644

FilePredicate = Callable[[str], bool]


def iter_archive_files(root: Path, want_file: FilePredicate) -> Iterator[tuple[Path, str]]:
    """Yield (absolute path, relative posix path) for every wanted file, sorted.

    Directories rejected by want_file are pruned, so nothing below them is
    visited.
    """
    root_abs = os.path.abspath(str(root))
    for dirpath, dirnames, filenames in os.walk(root_abs):
        rel = os.path.relpath(dirpath, root_abs)
        rel_dir = "" if rel in (".", "") else rel.replace(os.sep, "/")

        keep: List[str] = []
        for d in sorted(dirnames):
            rel_d = f"{rel_dir}/{d}" if rel_dir else d
            if want_file(rel_d):
                keep.append(d)
        dirnames[:] = keep

        for f in sorted(filenames):
            relf = f"{rel_dir}/{f}" if rel_dir else f
            if not want_file(relf):
                continue
            yield Path(dirpath) / f, relf


def zip_dir(source_dir: str | Path, *, filter: FilePredicate) -> bytes:
    """Return the ZIP bytes of source_dir, keeping only entries filter accepts."""
    root = Path(source_dir)
    if not root.is_dir():
        raise PackageIOError(f"Source directory {root} does not exist or is not a directory")

    buf = io.BytesIO()
    count = 0
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path, rel in iter_archive_files(root, filter):
            try:
                data = path.read_bytes()
            except FileNotFoundError:
                # Removed between listing and reading (editor swap files etc.)
                logger.debug(f"Skipping vanished file {rel}")
                continue
            except OSError as exc:
                raise PackageIOError(f"Could not read {path}: {exc}") from exc
            zi = zipfile.ZipInfo(rel, date_time=FIXED_ZIP_DT)
            zi.compress_type = zipfile.ZIP_DEFLATED
            zi.external_attr = (FILE_MODE & 0xFFFF) << 16
            zf.writestr(zi, data)
            count += 1

    logger.debug(f"Archived {count} file(s) from {root}")
    return buf.getvalue()


__all__ = ["FIXED_ZIP_DT", "iter_archive_files", "zip_dir"]
