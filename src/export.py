"""
CSV export of practice history.

One row per round, newest first, with the columns of CSV_HEADERS.
"""

import csv
import io
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Sequence

from src.models.round import Round
from src.stats import RoundSummary, summarize_rounds
from src.utils.constants import CSV_HEADERS, EXPORT_FILENAME_PREFIX

logger = logging.getLogger(__name__)


def format_date(value: Optional[datetime]) -> str:
    """Format like "Oct 18, 2026, 3:04 PM"."""
    if value is None:
        return "Unknown date"
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b} {value.day}, {value.year}, {hour}:{value:%M} {meridiem}"


def summary_to_row(summary: RoundSummary) -> list:
    precision = summary.average_precision
    return [
        summary.practice_number,
        format_date(summary.created_at),
        summary.total_score,
        summary.num_ends,
        f"{summary.average_per_end:.2f}",
        summary.best_end,
        f"{precision:.2f}" if precision is not None else "N/A",
        summary.notes,
    ]


def rounds_to_csv(rounds: Sequence[Round]) -> str:
    """Render the practice history as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for summary in summarize_rounds(rounds):
        writer.writerow(summary_to_row(summary))
    return buffer.getvalue()


def default_export_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{EXPORT_FILENAME_PREFIX}-{today.isoformat()}.csv"


def export_csv(rounds: Sequence[Round], path: Path | str) -> Path:
    """Write the practice history to ``path`` (a directory or a file)."""
    path = Path(path)
    if path.is_dir():
        path = path / default_export_name()
    path.write_text(rounds_to_csv(rounds), encoding="utf-8")
    logger.info(f"Exported {len(rounds)} rounds to {path}")
    return path
