"""
Tests for CSV export.
"""

import csv
import io
from datetime import date, datetime, timedelta

from conftest import make_round
from src.export import default_export_name, export_csv, format_date, rounds_to_csv
from src.utils.constants import CSV_HEADERS


def parse(text):
    return list(csv.reader(io.StringIO(text)))


class TestFormatDate:
    def test_afternoon(self):
        assert format_date(datetime(2026, 10, 18, 15, 4)) == "Oct 18, 2026, 3:04 PM"

    def test_midnight(self):
        assert format_date(datetime(2026, 1, 2, 0, 30)) == "Jan 2, 2026, 12:30 AM"

    def test_missing(self):
        assert format_date(None) == "Unknown date"


class TestRoundsToCsv:
    """One row per round, newest first."""

    def _rounds(self):
        now = datetime(2026, 10, 18, 15, 4)
        older = make_round(
            [(-0.1, 0), (0.1, 0), (0, 0)],
            [(0, 0), (0, 0), (0, 0)],
            created_at=now - timedelta(days=1),
            notes='said "nice", then left',
        )
        newer = make_round([(0, 0), (0, 0), (0, 0)], created_at=now)
        return older, newer

    def test_header_only_when_empty(self):
        assert parse(rounds_to_csv([])) == [CSV_HEADERS]

    def test_rows(self):
        older, newer = self._rounds()
        rows = parse(rounds_to_csv([older, newer]))
        assert rows[0] == CSV_HEADERS
        assert rows[1] == ["2", "Oct 18, 2026, 3:04 PM", "30", "1", "30.00", "30", "N/A", ""]
        practice, _, total, ends, per_end, best, precision, notes = rows[2]
        assert practice == "1"
        assert total == str(older.total_score)
        assert ends == "2"
        assert per_end == f"{older.total_score / 2:.2f}"
        assert best == "30"
        assert precision == f"{older.ends[0].precision:.2f}"
        assert notes == 'said "nice", then left'

    def test_quotes_escaped(self):
        older, _ = self._rounds()
        text = rounds_to_csv([older])
        assert '"said ""nice"", then left"' in text


class TestExportCsv:
    def test_default_name(self):
        assert default_export_name(date(2026, 10, 18)) == "artemis-practice-stats-2026-10-18.csv"

    def test_write_to_directory(self, tmp_path):
        older, newer = TestRoundsToCsv()._rounds()
        path = export_csv([older, newer], tmp_path)
        assert path.parent == tmp_path
        assert path.name.startswith("artemis-practice-stats-")
        assert len(parse(path.read_text(encoding="utf-8"))) == 3

    def test_write_to_file(self, tmp_path):
        target = tmp_path / "out.csv"
        assert export_csv([], target) == target
        assert target.read_text(encoding="utf-8").startswith("Practice Number,")
