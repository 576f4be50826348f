"""
Command-line interface for DOCX Composer.

Usage:
    docx-composer compose merged.docx part1.docx part2.docx
    docx-composer compose merged.docx part1.docx --template cover.docx
    docx-composer info part1.docx --json
    docx-composer version
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .composer import Composer
from .exceptions import DocxComposerError
from .options import ComposeOptions
from .parser.package_reader import PackageReader
from .parser.snapshot_loader import load_snapshot
from .utils.rich_logger import setup_logging, summary_table
from .version import __version__

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docx-composer",
        description="DOCX Composer - merge Word documents into one package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docx-composer compose merged.docx part1.docx part2.docx
  docx-composer compose merged.docx part1.docx --template cover.docx
  docx-composer info part1.docx --json
  docx-composer version
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Use plain logging instead of rich output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compose command
    compose_parser = subparsers.add_parser("compose", help="Compose documents into one")
    compose_parser.add_argument("output", help="Output DOCX file")
    compose_parser.add_argument("inputs", nargs="+", help="Input DOCX files, in order")
    compose_parser.add_argument(
        "-t", "--template",
        help="Seed document (default: the first input)",
    )
    compose_parser.add_argument(
        "--keep-revision-ids",
        action="store_true",
        help="Keep w:rsid* attributes of the inputs",
    )
    compose_parser.add_argument(
        "--keep-section-properties",
        action="store_true",
        help="Keep body-level section properties of the inputs",
    )
    compose_parser.add_argument(
        "--no-prune",
        action="store_true",
        help="Keep relationships that nothing references",
    )
    compose_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used to load inputs (default: executor default)",
    )

    # Info command
    info_parser = subparsers.add_parser("info", help="Show composition-relevant document information")
    info_parser.add_argument("input", help="Input DOCX file")
    info_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def cmd_compose(args) -> int:
    """Handle compose command."""
    options = ComposeOptions(
        strip_revision_ids=not args.keep_revision_ids,
        drop_section_properties=not args.keep_section_properties,
        prune_relationships=not args.no_prune,
        max_workers=args.workers,
    )
    output_path = Composer(options).compose_files(args.output, args.inputs, args.template)
    print(f"Saved: {output_path}")
    return 0


def cmd_info(args) -> int:
    """Handle info command."""
    input_path = Path(args.input)
    with PackageReader(input_path) as reader:
        snapshot = load_snapshot(reader, source=str(input_path))

    info = snapshot.summary()
    info["dangling_references"] = snapshot.find_dangling_references()

    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False, default=str))
    else:
        Console().print(summary_table(str(input_path), info))
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    print(f"DOCX Composer v{__version__}")
    return 0


COMMANDS = {
    "compose": cmd_compose,
    "info": cmd_info,
    "version": cmd_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(args.log_level, use_rich=not args.no_rich)

    try:
        return COMMANDS[args.command](args)
    except (DocxComposerError, FileNotFoundError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
