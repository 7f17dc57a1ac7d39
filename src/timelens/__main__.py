"""Timelens entry point.

Usage:
    python -m timelens [OPTIONS]

Options:
    --config PATH          Path to YAML config file
    --profile NAME         Profile name (dev, test)
    --days N               Lookback window in days
    --sensitivity LEVEL    Clustering sensitivity (loose, standard, strict)
    --trends               Include daily category and cluster series
    --json                 Print the full result as JSON
    --dry-run              Load config and exit
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pymongo.errors import PyMongoError

from . import __version__
from .analysis import ClusterSettings, GoalAnalyzer, summarize_analysis
from .config.loader import detect_profile, load_config
from .config.logs import setup_logging
from .storage import MongoRecordSource, MongoStorageClient


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="timelens",
        description="Timelens - goal analytics for personal time tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m timelens                      # Analyze the last 30 days
  python -m timelens --days 7 --json      # Last week, machine readable
  python -m timelens --sensitivity loose  # Merge goals more eagerly

Environment:
  TIMELENS_PROFILE     Set profile (dev, test)
  TIMELENS_MONGO_URI   Override the MongoDB connection URI
  TIMELENS_LOG_LEVEL   Override the log level
""",
    )

    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument("--profile", choices=["dev", "test"], help="Configuration profile to use")
    parser.add_argument("--days", type=int, help="Lookback window in days", metavar="N")
    parser.add_argument(
        "--sensitivity",
        choices=["loose", "standard", "strict"],
        help="Clustering sensitivity",
    )
    parser.add_argument("--trends", action="store_true", help="Include daily trend series")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--dry-run", action="store_true", help="Load config and exit (for testing)"
    )
    parser.add_argument("--version", action="version", version=f"Timelens v{__version__}")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=args.profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if args.days is not None:
        config.analysis.lookback_days = args.days
    if args.sensitivity:
        config.analysis.sensitivity = args.sensitivity

    setup_logging(config.logging)
    logger = logging.getLogger("timelens")
    logger.info("Timelens v%s", __version__)
    logger.info("Profile: %s", args.profile or detect_profile())

    if args.dry_run:
        logger.info("Dry run complete")
        return 0

    try:
        with MongoStorageClient(config.storage) as client:
            analyzer = GoalAnalyzer(MongoRecordSource(client), config=config)
            date_range = analyzer.default_range()
            result = analyzer.analyze(
                date_range,
                ClusterSettings.from_name(config.analysis.sensitivity),
                include_trends=args.trends,
            )
    except PyMongoError as e:
        logger.error("Analysis failed: %s", e)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(summarize_analysis(result, date_range))
    return 0


if __name__ == "__main__":
    sys.exit(main())
