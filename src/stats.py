"""
Precision and aggregate statistics for Artemis.

Two orthogonal measures are kept apart throughout:
  - Accuracy: how far shots land from the centre of the target.
  - Precision: how tightly the shots of one end group together, measured
    as the mean distance of each shot from the group's own centroid
    ("mean radius"). A tight group far from the centre has a small
    precision value and a large distance from centre.

Lower is better for both. Everything is recomputed from scratch on demand.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

import numpy as np

from src.scoring import distance_from_center, practice_color
from src.utils.constants import TARGET_RADIUS_UNITS

if TYPE_CHECKING:
    from src.models.round import Round
    from src.models.shot import Shot

logger = logging.getLogger(__name__)


def average(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def group_center(shots: Sequence["Shot"]) -> tuple[float, float]:
    """Centroid of a group of shots, (0, 0) when there are none."""
    return (average(s.x for s in shots), average(s.y for s in shots))


def end_precision(shots: Sequence["Shot"], target_radius: float = TARGET_RADIUS_UNITS) -> float:
    """Mean distance of each shot from the group centroid, in physical units.

    Returns 0 for fewer than two shots since there is no spread to measure.
    """
    if len(shots) <= 1:
        return 0.0

    points = np.array([(s.x, s.y) for s in shots], dtype=float)
    centroid = points.mean(axis=0)
    distances = np.hypot(*(points - centroid).T) * target_radius
    return float(distances.mean())


def _nonzero_precisions(rounds: Iterable["Round"]) -> list[float]:
    # Ends with fewer than two shots report 0 and carry no grouping info
    return [end.precision for r in rounds for end in r.ends if end.precision > 0]


# =============================================================================
# Aggregates over many rounds
# =============================================================================

@dataclass(frozen=True)
class AggregateStats:
    """Summary over a set of rounds.

    Attributes:
        shot_count: Number of shots across all rounds.
        average_score: Mean score per shot.
        average_distance_from_center: Mean accuracy per shot (units).
        missed_shots: Shots that scored 0.
        average_precision: Mean of the non-zero end precisions (units).
    """
    shot_count: int = 0
    average_score: float = 0.0
    average_distance_from_center: float = 0.0
    missed_shots: int = 0
    average_precision: float = 0.0


def compute_aggregate_stats(
    rounds: Sequence["Round"],
    target_radius: float = TARGET_RADIUS_UNITS,
) -> AggregateStats:
    """Aggregate statistics across every shot of every round."""
    shots = [shot for r in rounds for end in r.ends for shot in end.shots]
    if not shots:
        return AggregateStats()

    return AggregateStats(
        shot_count=len(shots),
        average_score=average(s.score for s in shots),
        average_distance_from_center=average(
            distance_from_center(s, target_radius) for s in shots
        ),
        missed_shots=sum(1 for s in shots if s.score == 0),
        average_precision=average(_nonzero_precisions(rounds)),
    )


def average_position(rounds: Sequence["Round"]) -> tuple[float, float]:
    """Mean position of every shot, marked on the all-shots overlay."""
    return group_center([shot for r in rounds for shot in r.shots])


# =============================================================================
# Per-round summaries (history list, chart and CSV export)
# =============================================================================

@dataclass(frozen=True)
class RoundSummary:
    """One row of practice history."""
    practice_number: int
    round_id: str
    created_at: Optional[datetime]
    total_score: int
    num_ends: int
    average_per_end: float
    best_end: int
    average_precision: Optional[float]  # None when no end has a measurable group
    average_score: float
    average_distance_from_center: float
    notes: str = ""


@dataclass(frozen=True)
class ChartPoint:
    """History chart values for one practice, all on a higher-is-better scale."""
    practice: str
    practice_number: int
    avg_score: float
    avg_distance: float
    avg_precision: float
    total_score: int
    created_at: Optional[datetime]
    color: str = ""


def summarize_round(
    round_: "Round",
    practice_number: int,
    target_radius: float = TARGET_RADIUS_UNITS,
) -> RoundSummary:
    shots = round_.shots
    precisions = _nonzero_precisions([round_])
    num_ends = round_.num_ends
    return RoundSummary(
        practice_number=practice_number,
        round_id=round_.id,
        created_at=round_.created_at,
        total_score=round_.total_score,
        num_ends=num_ends,
        average_per_end=round_.total_score / num_ends if num_ends else 0.0,
        best_end=round_.best_end_score,
        average_precision=average(precisions) if precisions else None,
        average_score=average(s.score for s in shots),
        average_distance_from_center=average(
            distance_from_center(s, target_radius) for s in shots
        ),
        notes=round_.notes,
    )


def sort_newest_first(rounds: Iterable["Round"]) -> list["Round"]:
    """Order rounds by creation time, newest first; undated rounds last."""
    return sorted(
        rounds,
        key=lambda r: r.created_at.timestamp() if r.created_at else float("-inf"),
        reverse=True,
    )


def summarize_rounds(
    rounds: Sequence["Round"],
    target_radius: float = TARGET_RADIUS_UNITS,
) -> list[RoundSummary]:
    """Summaries newest-first; the oldest practice is number 1."""
    ordered = sort_newest_first(rounds)
    total = len(ordered)
    return [
        summarize_round(r, total - index, target_radius)
        for index, r in enumerate(ordered)
    ]


def prepare_chart_data(
    rounds: Sequence["Round"],
    target_radius: float = TARGET_RADIUS_UNITS,
) -> list[ChartPoint]:
    """History chart points, in the order the rounds are given.

    Accuracy and grouping are plotted as ``target_radius - value`` so that,
    like the average score, higher means better.
    """
    points = []
    total = len(rounds)
    for index, r in enumerate(rounds):
        summary = summarize_round(r, total - index, target_radius)
        precision = summary.average_precision or 0.0
        points.append(ChartPoint(
            practice=f"#{summary.practice_number}",
            practice_number=summary.practice_number,
            avg_score=round(summary.average_score, 2),
            avg_distance=target_radius - round(summary.average_distance_from_center, 2),
            avg_precision=target_radius - round(precision, 2),
            total_score=summary.total_score,
            created_at=r.created_at,
            color=practice_color(index),
        ))
    logger.debug(f"Prepared {len(points)} chart points")
    return points
