"""
CSV Export of Journey Lists.

Renders journeys as a CSV download named after the current date. Fields are
joined with plain commas and are not quoted, so values containing a comma
(an email such as ``"a,b"@x.com`` or an odd UTM source) shift the columns of
their row.
"""

from datetime import date
from typing import Callable, Sequence

from loguru import logger

from common.exceptions import NothingToExportError
from services.journey_service.models import Journey, JourneyExport

EXPORT_HEADERS = ["Visitor ID", "Email", "First Source", "Touchpoints", "Revenue", "First Seen", "Last Seen"]


def export_filename(day: date) -> str:
    return f"customer-journeys-{day.isoformat()}.csv"


def journey_row(journey: Journey) -> list[str]:
    return [
        journey.visitor_id,
        journey.lead.email if journey.lead else "",
        journey.first_source.utm_source or "direct",
        str(len(journey.touchpoints)),
        str(journey.total_revenue),
        journey.first_seen.isoformat(),
        journey.last_seen.isoformat(),
    ]


class ExportFormatter:
    """Formats a journey list as a dated CSV file.

    Args:
        today: Returns the date used in the filename; replaced in tests.
    """

    def __init__(self, today: Callable[[], date] = date.today):
        self.today = today

    def export(self, journeys: Sequence[Journey]) -> JourneyExport:
        """
        Render journeys as CSV.

        Raises:
            NothingToExportError: If there are no journeys. No header-only file
                is produced.
        """
        if not journeys:
            raise NothingToExportError()

        lines = [",".join(EXPORT_HEADERS)]
        lines.extend(",".join(journey_row(journey)) for journey in journeys)
        content = "\n".join(lines).encode("utf-8")

        export = JourneyExport(
            filename=export_filename(self.today()),
            content=content,
            row_count=len(journeys),
        )
        logger.info(f"Exported {export.row_count} journeys to {export.filename}")
        return export
