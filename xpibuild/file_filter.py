"""
file_filter.py - Decide which source files go into the archive.

Patterns are glob-style and matched against the path relative to the source
directory, using forward slashes:

- ``*`` matches within one path segment
- ``?`` matches a single character within a segment
- ``**`` matches across segments (``**/`` may also match nothing)
- everything else is literal

A pattern that matches a directory also matches everything below it, so
``**/.*`` excludes ``.git/config`` as well as ``.git``.
"""
from __future__ import annotations

import os
import re
from typing import Iterable, List, Optional, Pattern

from xpibuild.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FILES_TO_IGNORE = (
    "**/*.xpi",
    "**/*.zip",
    "**/.*",  # any hidden file or directory
)


def glob_to_regex(pattern: str) -> Optional[Pattern[str]]:
    """Translate a glob into an anchored regex; None if it cannot compile."""
    out: List[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    i += 1
                    out.append("(?:.*/)?")
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(ch))
        i += 1
    try:
        return re.compile("".join(out) + r"\Z", re.DOTALL)
    except re.error:
        return None


def normalize_rel_path(path: str) -> str:
    """Forward slashes, no leading ``./`` or ``/``."""
    rel = str(path).replace(os.sep, "/")
    if os.altsep:
        rel = rel.replace(os.altsep, "/")
    while rel.startswith("./"):
        rel = rel[2:]
    return rel.strip("/")


def _candidates(rel: str) -> Iterable[str]:
    # The path itself and each ancestor directory, shortest first
    parts = [p for p in rel.split("/") if p]
    for i in range(1, len(parts) + 1):
        yield "/".join(parts[:i])


class FileFilter:
    """Allows or ignores files when creating the archive."""

    def __init__(self, files_to_ignore: Optional[Iterable[str]] = None):
        if files_to_ignore is None:
            files_to_ignore = DEFAULT_FILES_TO_IGNORE
        self.files_to_ignore: List[str] = list(files_to_ignore)
        self._compiled = [(pat, glob_to_regex(pat)) for pat in self.files_to_ignore]

    def matches(self, rel_path: str) -> Optional[str]:
        """Return the first ignore pattern matching rel_path, if any."""
        rel = normalize_rel_path(rel_path)
        if not rel:
            return None
        candidates = list(_candidates(rel))
        for pat, rx in self._compiled:
            if rx is None:
                continue
            if any(rx.match(c) for c in candidates):
                return pat
        return None

    def want_file(self, rel_path: str) -> bool:
        """Return True if the file is wanted for the archive."""
        pat = self.matches(rel_path)
        if pat is not None:
            logger.debug(f"Not including file {rel_path} in archive (matched {pat!r})")
            return False
        return True

    def __repr__(self) -> str:
        return f"FileFilter(files_to_ignore={self.files_to_ignore!r})"


__all__ = ["DEFAULT_FILES_TO_IGNORE", "FileFilter", "glob_to_regex", "normalize_rel_path"]
