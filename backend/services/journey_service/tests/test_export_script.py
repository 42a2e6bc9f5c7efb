"""
Tests for the journey export command-line script.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from common.exceptions import RecordStoreError
from scripts.export_journeys import (
    EXIT_NOTHING_TO_EXPORT,
    EXIT_OK,
    EXIT_STORE_FAILURE,
    parse_args,
    run_export,
)
from services.journey_service.models import JourneyQueryResult
from services.journey_service.services import ExportFormatter, compute_stats


@pytest.fixture
def formatter():
    return ExportFormatter(today=lambda: date(2024, 5, 2))


def aggregator_returning(journeys):
    aggregator = MagicMock()
    aggregator.run_query = AsyncMock(
        return_value=JourneyQueryResult(journeys=journeys, stats=compute_stats(journeys), is_empty=not journeys)
    )
    return aggregator


class TestExportScript:

    def test_parse_args_defaults(self):
        args = parse_args(["--project-id", "proj-1"])

        assert args.project_id == "proj-1"
        assert args.search is None
        assert args.date_range == "30d"
        assert args.status == "all"
        assert args.stats_only is False

    def test_parse_args_rejects_unknown_status(self):
        with pytest.raises(SystemExit):
            parse_args(["--project-id", "proj-1", "--status", "churned"])

    @pytest.mark.asyncio
    async def test_writes_csv_file(self, tmp_path, formatter, make_journey):
        args = parse_args(["--project-id", "proj-1", "--status", "visitors", "--output-dir", str(tmp_path / "out")])
        aggregator = aggregator_returning([make_journey("v-1")])

        code = await run_export(args, aggregator, formatter)

        assert code == EXIT_OK
        written = (tmp_path / "out" / "customer-journeys-2024-05-02.csv").read_text(encoding="utf-8")
        assert written.split("\n")[1].startswith("v-1,,direct,1,0,")
        query = aggregator.run_query.call_args.args[0]
        assert query.project_id == "proj-1"
        assert query.status_filter.value == "visitors"

    @pytest.mark.asyncio
    async def test_nothing_to_export_writes_no_file(self, tmp_path, formatter):
        args = parse_args(["--project-id", "proj-1", "--output-dir", str(tmp_path)])

        code = await run_export(args, aggregator_returning([]), formatter)

        assert code == EXIT_NOTHING_TO_EXPORT
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_stats_only_writes_no_file(self, tmp_path, formatter, make_journey):
        args = parse_args(["--project-id", "proj-1", "--output-dir", str(tmp_path), "--stats-only"])

        code = await run_export(args, aggregator_returning([make_journey()]), formatter)

        assert code == EXIT_OK
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_store_failure_exit_code(self, tmp_path, formatter):
        args = parse_args(["--project-id", "proj-1", "--output-dir", str(tmp_path)])
        aggregator = MagicMock()
        aggregator.run_query = AsyncMock(side_effect=RecordStoreError("loading recent visitors"))

        assert await run_export(args, aggregator, formatter) == EXIT_STORE_FAILURE
