#!/usr/bin/env python3
"""
Command-line interface for spotty

Usage:
    spotty source.dxp ./output

JavaScript lands in ./output/js, IronPython in ./output/python, any other
language in a folder named after it.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from spotty.core.exceptions import ExtractionError, ScriptWriteError
from spotty.core.models import ExtractionOptions
from spotty.core.services import ExtractionService
from spotty.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotty",
        description="Extract the scripts embedded in a Spotfire DXP file",
        epilog="JavaScript is written to <output>/js and IronPython to <output>/python.",
    )
    parser.add_argument("container", help="Path to the .dxp file")
    parser.add_argument("output", help="Directory receiving the extracted scripts")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the extractor; return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        options = ExtractionOptions.from_config()
    except ValueError as e:
        print(f"Error: invalid extraction config: {e}", file=sys.stderr)
        return 1
    setup_logging(options.verbose)

    service = ExtractionService(options)
    try:
        report = service.extract(args.container, args.output)
    except ScriptWriteError as e:
        logger.debug("Write failures: %s", e.failures)
        print(f"Error: {e}", file=sys.stderr)
        print(f"Wrote {len(e.written)} script files to {args.output}", file=sys.stderr)
        return 1
    except ExtractionError as e:
        logger.debug("Extraction failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    print(f"Wrote {report.count} script files to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
