"""CLI entry point: argparse dispatcher for all subcommands."""
from __future__ import annotations

import argparse
import json
import sys
import traceback


# ---------------------------------------------------------------------------
# Command registry: command name → (module_path, function_name)
# Lazy-imported at dispatch time to keep startup fast.
# ---------------------------------------------------------------------------
COMMANDS = {
    "build": ("cli.commands.build", "cmd_build"),
}


# ---------------------------------------------------------------------------
# Parser builder
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    from cli._version import __version__

    parser = argparse.ArgumentParser(
        prog="xpi-build",
        description="Package a web extension source directory into an .xpi",
    )
    parser.add_argument("--debug", action="store_true", help="Show stack traces on error")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # build
    p = sub.add_parser("build", help="Create the extension package")
    p.add_argument("-s", "--source-dir", default=None,
                   help="Web extension source directory (default: current directory)")
    p.add_argument("-a", "--artifacts-dir", default=None,
                   help="Directory for the .xpi (default: ./web-ext-artifacts)")
    p.add_argument("--as-needed", "--watch", dest="as_needed", action="store_true",
                   help="Watch for file changes and re-build as needed")
    p.add_argument("-i", "--ignore-files", nargs="+", default=None, metavar="PATTERN",
                   help="Glob patterns to leave out of the package (replaces the defaults)")

    return parser


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    args.debug = bool(getattr(args, "debug", False))

    entry = COMMANDS.get(args.command)
    if not entry:
        parser.print_help()
        sys.exit(1)

    mod_path, fn_name = entry
    try:
        import importlib
        mod = importlib.import_module(mod_path)
        fn = getattr(mod, fn_name)
        fn(args)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, default=str)
        sys.stdout.write("\n")
        if args.debug:
            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
