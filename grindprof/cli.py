"""
Command-line front end: rank the functions in a saved annotate report.

    callgrind_annotate callgrind.out | grindprof callgrind -n 10
    grindprof cachegrind -n 5 --sort d1mr cg-report.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import GrindprofError
from .metrics import CACHE_METRICS, RecognitionTable
from .profiler import Profiler
from .records import ProfilerMode

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    """Setup logging configuration"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grindprof",
        description="Rank the most expensive functions in callgrind/cachegrind annotate output",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log skipped lines and detected headers")
    parser.add_argument("--labels", type=Path, default=None,
                        help="JSON file of accepted header labels per column")

    subparsers = parser.add_subparsers(dest="mode", required=True)

    callgrind = subparsers.add_parser("callgrind", help="Rank callgrind_annotate output by instructions")
    cachegrind = subparsers.add_parser("cachegrind", help="Rank cg_annotate output by cache events")

    for subparser in (callgrind, cachegrind):
        subparser.add_argument("report", nargs="?", default="-",
                               help="Annotate output to read (default: stdin)")
        subparser.add_argument("-n", dest="count", metavar="NUMBER", default="all",
                               help="Number of functions to show (default: all)")
        subparser.add_argument("--keep-duplicates", action="store_true",
                               help="List repeated symbols separately instead of merging them")

    cachegrind.add_argument("--sort", default="none", metavar="METRIC",
                            help=f"Metric to sort by ({', '.join(CACHE_METRICS)}; default: report order)")
    return parser


def read_report(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8") as file:
        return file.read()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.report != "-" and not Path(args.report).exists():
        print(f"Error: Input file not found: {args.report}", file=sys.stderr)
        return 1

    try:
        table = RecognitionTable.from_json(args.labels) if args.labels else None
        profiler = Profiler(
            ProfilerMode(args.mode),
            table=table,
            merge_duplicates=not args.keep_duplicates,
        )
        content = read_report(args.report)
        report = profiler.report(content, count=args.count, sort=getattr(args, "sort", "none"))
    except (GrindprofError, OSError, UnicodeDecodeError) as exception:
        print(f"Error: {exception}", file=sys.stderr)
        return 1

    print(report, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
