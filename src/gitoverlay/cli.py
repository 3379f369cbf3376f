"""Command-line entry point for gitoverlay.

Prints a directory listing with a git status badge after each changed entry,
the same annotations a file browser would draw:

1. Read command line arguments and the configuration file, writing a
   default one on first run.
2. Check that the requested directory really exists.
3. Ask the status service for the repository's status map.
4. Print the listing, directories first, with badges.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gitoverlay import __version__
from gitoverlay.config import (
    create_default_config,
    get_highlight_colors,
    get_status_settings,
    get_symbols,
    set_status_option,
)
from gitoverlay.overlay import (
    annotate_entries,
    build_color_table,
    build_symbol_table,
    list_directory,
    render_listing,
)
from gitoverlay.service import ServiceSettings, StatusService


def validate_directory(path: Path) -> Path:
    """Check that a path exists and points to a directory.

    A bad path (a typo, or a file instead of a folder) falls back to the
    current working directory with a warning instead of aborting.
    """
    try:
        resolved = path.expanduser().resolve()
        if not resolved.exists():
            print(f"Warning: directory does not exist: {path}", file=sys.stderr)
            print("   Using current directory instead", file=sys.stderr)
            return Path.cwd()
        if not resolved.is_dir():
            print(f"Warning: path is not a directory: {path}", file=sys.stderr)
            print("   Using current directory instead", file=sys.stderr)
            return Path.cwd()
        return resolved
    except (OSError, RuntimeError) as e:
        print(f"Warning: Cannot access directory: {path}", file=sys.stderr)
        print(f"   Error: {e}", file=sys.stderr)
        print("   Using current directory instead", file=sys.stderr)
        return Path.cwd()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List a directory with git status indicators."
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version number and exit.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to list (default: current directory).",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Include hidden entries.",
    )
    parser.add_argument(
        "--no-directory-status",
        action="store_true",
        help="Only annotate files, not the directories containing them.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Print symbols without ANSI colors.",
    )
    toggle = parser.add_mutually_exclusive_group()
    toggle.add_argument(
        "--enable",
        action="store_true",
        help="Turn status annotations on in the configuration file and exit.",
    )
    toggle.add_argument(
        "--disable",
        action="store_true",
        help="Turn status annotations off in the configuration file and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log cache and git activity to stderr.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    create_default_config()

    if args.enable or args.disable:
        set_status_option("enabled", bool(args.enable))
        print(f"Git status annotations {'enabled' if args.enable else 'disabled'}")
        return 0

    status_section = dict(get_status_settings())
    if args.no_directory_status:
        status_section["show_directory_status"] = False

    directory = validate_directory(Path(args.directory))
    entries = list_directory(directory, show_hidden=args.all)

    status = {}
    if status_section.get("enabled", True):
        service = StatusService(ServiceSettings.from_config(status_section))
        status = service.acquire(directory)

    use_color = not args.no_color and sys.stdout.isatty()
    annotations = annotate_entries(status, directory, entries, build_symbol_table(get_symbols()))
    colors = build_color_table(get_highlight_colors()) if use_color else None
    for line in render_listing(annotations, colors, use_color):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
