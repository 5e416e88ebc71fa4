"""Command line entry point: ``python -m clusterlint DUMP``.

Exit codes:
    0 - no findings
    1 - cluster infected (artifacts exported; individual write failures are reported inline)
    2 - snapshot unreadable or not an agency dump, or the analysis itself failed
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from clusterlint.config import get_settings
from clusterlint.core.errors import ClusterLintError
from clusterlint.infrastructure.observability import setup_logging
from clusterlint.services.analysis_runner import run_check

logger = logging.getLogger("clusterlint")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clusterlint",
        description="Offline consistency analysis of an agency state dump.",
    )
    parser.add_argument(
        "dump",
        type=Path,
        help="Agency dump JSON file",
    )
    parser.add_argument(
        "--stores", "-s",
        type=Path,
        help="Agency stores JSON file (source of pending callbacks)",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        help="Directory for remediation artifacts (default: CLUSTERLINT_OUTPUT_DIR or .)",
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output JSON instead of the text report",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for stderr diagnostics (default: CLUSTERLINT_LOG_LEVEL)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, settings.log_format)

    try:
        outcome = run_check(
            args.dump,
            settings,
            stores_path=args.stores,
            output_dir=args.output_dir,
            as_json=args.json,
        )
    except ClusterLintError as e:
        logger.error(e.message, extra={"error_code": e.code})
        if args.json:
            print(json.dumps(e.to_response()))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return 2
    except Exception as e:
        logger.error(f"Analysis failed unexpectedly: {e!r}", exc_info=True)
        if args.json:
            print(json.dumps({"error": {"code": "INTERNAL_ERROR", "message": str(e)}}))
        else:
            print(f"Error: analysis failed unexpectedly: {e}", file=sys.stderr)
        return 2

    return 1 if outcome.infected else 0


if __name__ == "__main__":
    sys.exit(main())
