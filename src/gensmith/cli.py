"""Command-line interface for gensmith."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import Settings, settings as default_settings
from .ops import Expander
from .placeholders import (
    CASE_RULES,
    GensmithError,
    PlaceholderMatcher,
    build_mapping,
    get_case_rule,
    is_pair,
    parse_pair,
)

logger = logging.getLogger(__name__)

EXAMPLE = """\
Example:
  gensmith typeKey=int typeValue=str mypkg/templates/mapping.py
  gensmith type=int mypkg.templates
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gensmith",
        usage="%(prog)s [options] [mappings] [files, directories or packages]",
        description="gensmith - pseudo-generics expansion for Python templates",
        epilog=EXAMPLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "args",
        nargs="*",
        metavar="ARG",
        help="key=value mappings followed by template files, directories or packages "
        "(default: current directory)",
    )
    parser.add_argument(
        "--output-dir", "-o", type=Path, help="Directory for generated files (default: .)"
    )
    parser.add_argument(
        "--case-rule",
        choices=sorted(CASE_RULES),
        help="How values are capitalized for _Name_ placeholders (default: title)",
    )
    parser.add_argument(
        "--pattern", help="Regular expression matching placeholders inside identifiers"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Render templates without writing files"
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase logging (-v, -vv)"
    )
    return parser


def split_args(args: list[str]) -> tuple[list[str], list[str]]:
    """Split leading key=value mappings from the targets that follow them."""
    index = 0
    while index < len(args) and is_pair(args[index]):
        index += 1
    return args[:index], args[index:]


def configure_logging(level: str, verbose: int = 0) -> None:
    """Configure the root logger once for the process."""
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s: %(message)s",
    )


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    mappings, targets = split_args(args.args)
    if any(target.startswith("-") for target in targets):
        parser.error("flags should be given before arguments")

    overrides = {}
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.case_rule is not None:
        overrides["case_rule"] = args.case_rule
    if args.pattern is not None:
        overrides["placeholder_pattern"] = args.pattern
    if args.dry_run:
        overrides["dry_run"] = True
    run_settings: Settings = default_settings.model_copy(update=overrides)

    configure_logging(run_settings.log_level, args.verbose)

    try:
        matcher = PlaceholderMatcher(run_settings.placeholder_pattern)
        table = build_mapping(
            [parse_pair(arg) for arg in mappings],
            capitalize=get_case_rule(run_settings.case_rule),
            matcher=matcher,
        )
    except GensmithError as e:
        logger.error(str(e))
        sys.exit(1)

    if not table.keys:
        logger.warning("No key=value mappings given; only files without placeholders will expand")

    try:
        results = Expander(table, run_settings, matcher).run(targets)
    except GensmithError:
        # Already logged with the failing file as prefix
        sys.exit(1)

    if run_settings.dry_run:
        for result in results:
            print(f"# {result.source} -> {result.output}")
            print(result.text)


if __name__ == "__main__":
    main()
