"""
Journey Export Script.

Command-line entry point for the journey engine. Runs the same pipeline as the
journey service API (visitor selection, journey reconstruction, status filter)
for one project, then either writes the CSV export or prints the journey stats.

**Example Usage:**
    ```bash
    # Run from backend directory
    cd backend
    python -m scripts.export_journeys --project-id proj-123 --date-range 7d

    # Customers found through a lead email search, written to a directory
    python scripts/export_journeys.py --project-id proj-123 --search "@acme.com" \\
        --status customers --output-dir exports/

    # Stats only, no file written
    python scripts/export_journeys.py --project-id proj-123 --stats-only
    ```

**Exit Codes:**
    - 0: export written (or stats printed)
    - 1: the record store failed
    - 2: no journeys matched, nothing written
"""

import argparse
import asyncio
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from common.exceptions import NothingToExportError, RecordStoreError
from common.logging import setup_logging
from services.journey_service.database.dependencies import create_record_store
from services.journey_service.models import DateRangePreset, JourneyQuery, StatusFilter
from services.journey_service.services import ExportFormatter, JourneyAggregator
from services.journey_service.services.dependencies import build_aggregator

EXIT_OK = 0
EXIT_STORE_FAILURE = 1
EXIT_NOTHING_TO_EXPORT = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export reconstructed customer journeys as CSV.")
    parser.add_argument("--project-id", required=True, help="Project whose journeys are exported")
    parser.add_argument("--search", default=None, help="Lead email fragment (with @) or a visitor ID")
    parser.add_argument(
        "--date-range",
        default=DateRangePreset.LAST_30_DAYS.value,
        choices=[preset.value for preset in DateRangePreset],
        help="Look-back window for recent visitors",
    )
    parser.add_argument(
        "--status",
        default=StatusFilter.ALL.value,
        choices=[status.value for status in StatusFilter],
        help="Keep only journeys in this funnel stage",
    )
    parser.add_argument("--output-dir", type=Path, default=Path("."), help="Directory the CSV is written to")
    parser.add_argument("--stats-only", action="store_true", help="Print stats instead of writing a file")
    return parser.parse_args(argv)


async def run_export(
    args: argparse.Namespace,
    aggregator: JourneyAggregator,
    formatter: ExportFormatter,
) -> int:
    """
    Run the journey query described by ``args`` and write or print its result.

    Returns:
        int: Process exit code.
    """
    query = JourneyQuery(
        project_id=args.project_id,
        search=args.search,
        date_range=args.date_range,
        status_filter=args.status,
    )

    try:
        result = await aggregator.run_query(query)
    except RecordStoreError as e:
        logger.error(f"Could not fetch journeys: {e}")
        return EXIT_STORE_FAILURE

    stats = result.stats
    logger.info(
        f"Visitors: {stats.total_visitors} | Leads: {stats.total_leads} | "
        f"Customers: {stats.total_customers} | Revenue: {stats.total_revenue} | "
        f"Avg touchpoints: {stats.avg_touchpoints} | Conversion: {stats.conversion_rate:.1f}%"
    )
    if args.stats_only:
        return EXIT_OK

    try:
        export = formatter.export(result.journeys)
    except NothingToExportError as e:
        logger.warning(e.message)
        return EXIT_NOTHING_TO_EXPORT

    args.output_dir.mkdir(parents=True, exist_ok=True)
    path = args.output_dir / export.filename
    path.write_bytes(export.content)
    logger.success(f"Wrote {export.row_count} journeys to {path}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging("journey-export", log_to_files=False)
    aggregator = build_aggregator(create_record_store())
    return asyncio.run(run_export(args, aggregator, ExportFormatter()))


if __name__ == "__main__":
    sys.exit(main())
