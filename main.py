"""CLI entrypoint for the Elements -> eScholarship grant sync."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from config import RunMode, SyncConfig, load_config, parse_units
from csv_sink import ResultLog
from elements_feed import ElementsFeedClient
from errors import ConfigurationError, GrantSyncError, ItemScanError
from escholarship_api import EscholarshipClient
from ingest import SubiGutsUpdater
from models import ScanTotals
from scanner import GrantScanner

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        description="Sync funding info from Elements into eScholarship items harvested from it"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--test",
        dest="mode",
        action="store_const",
        const=RunMode.DRY_RUN,
        help="Report differences without changing anything",
    )
    mode.add_argument(
        "--go",
        dest="mode",
        action="store_const",
        const=RunMode.APPLY,
        help="Report differences and replace funding in eScholarship",
    )
    parser.add_argument("--units", default=None, help="Comma-separated unit ids to scan (default: GRANT_SYNC_UNITS)")
    parser.add_argument("--results", default=None, help="Path of the tab-delimited results file")
    parser.add_argument(
        "--title-guard",
        action="store_true",
        default=None,
        help="Skip items whose Elements title differs too much (for environments with re-crawled records)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run(config: SyncConfig, mode: RunMode | None) -> ScanTotals:
    """Run one full sync over every configured unit."""
    with ResultLog(config.results_path) as results:
        scanner = GrantScanner(
            lister=EscholarshipClient(config),
            feed=ElementsFeedClient(config),
            updater=SubiGutsUpdater(config),
            results=results,
            mode=mode,
            title_drift_guard=config.title_drift_guard,
        )
        return scanner.scan_all(config.units)


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the sync; returns the exit status."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        if args.mode is None:
            raise ConfigurationError("either --test or --go must be specified")
        config = load_config().with_overrides(
            units=parse_units(args.units) or None,
            results_path=args.results,
            title_drift_guard=args.title_guard,
        )
        run(config, args.mode)
    except GrantSyncError as exc:
        LOGGER.error("Error: %s", exc, exc_info=isinstance(exc, ItemScanError))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
