"""Build command: package the extension, optionally rebuilding on change."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from cli.core import output_json, resolve_source_dir


def cmd_build(args: argparse.Namespace) -> None:
    """Package the source directory into an .xpi under the artifacts dir."""
    from xpibuild.build import build
    from xpibuild.config import BuildConfig, default_artifacts_dir
    from xpibuild.file_filter import FileFilter

    source_dir = resolve_source_dir(getattr(args, "source_dir", None))
    artifacts_arg = getattr(args, "artifacts_dir", None)
    artifacts_dir = Path(artifacts_arg).expanduser() if artifacts_arg else default_artifacts_dir()
    ignore_files = getattr(args, "ignore_files", None)

    config = BuildConfig(
        source_dir=source_dir,
        artifacts_dir=artifacts_dir,
        watch=bool(getattr(args, "as_needed", False)),
        file_filter=FileFilter(ignore_files) if ignore_files else None,
    )
    outcome = build(config)
    output_json({"ok": True, "artifact_path": outcome.result.artifact_path})
    sys.stdout.flush()

    session = outcome.watcher
    if session is None:
        return

    print(f"Watching {config.source_dir} (press Ctrl+C to stop)", file=sys.stderr)
    session.install_signal_handlers()
    try:
        session.wait()
    except KeyboardInterrupt:
        print("\nStopping watcher...", file=sys.stderr)
    finally:
        session.close()
