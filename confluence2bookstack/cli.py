#!/usr/bin/env python3
"""
confluence2bookstack CLI

Command-line interface for converting a Confluence HTML export.

Usage:
    confluence2bookstack <folder> [options]
    python -m confluence2bookstack.cli ./MYSPACE/
    python -m confluence2bookstack.cli                # prompts for the folder

Options:
    --dry-run            Convert and report output names without writing files
"""

import argparse
import os
import sys

from confluence2bookstack.core import Converter


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="confluence2bookstack",
        description=(
            "Confluence HTML Export to BookStack Converter\n\n"
            "Converts every page of a Confluence space export into HTML\n"
            "that can be pasted into the BookStack WYSIWYG editor. Each page\n"
            "is saved next to its source as 'CONVERTED - <Page-Title>.html'."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  confluence2bookstack ./MYSPACE/\n"
            "  confluence2bookstack ./MYSPACE/ --dry-run\n"
        ),
    )

    parser.add_argument(
        "folder",
        nargs="?",
        help="Folder containing the unzipped Confluence HTML export",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Convert pages but do not write any output files",
    )

    args = parser.parse_args(argv)

    folder = args.folder
    if not folder:
        try:
            folder = input("Folder containing the Confluence export: ").strip().strip('"')
        except EOFError:
            folder = ""
    if not folder or not os.path.isdir(folder):
        print(f"[ERROR] Not a folder: {folder}", file=sys.stderr)
        return 1

    converter = Converter(dry_run=args.dry_run)

    print("=" * 60)
    print("  CONFLUENCE -> BOOKSTACK CONVERTER")
    print("=" * 60)
    print()

    summary = converter.convert_directory(folder)

    print()
    print("-" * 60)
    print(
        f"  Done: {len(summary.converted)} converted, {len(summary.failed)} errors, "
        f"{summary.warning_count} warnings"
    )
    for doc in summary.converted:
        for warning in doc.warnings:
            print(f"  [WARN] {doc.source_path}: {warning}")
    for path, error in summary.failed.items():
        print(f"  [ERROR] {path}: {error}")
    print("-" * 60)

    return 0 if summary.ok else 2


if __name__ == "__main__":
    sys.exit(main())
