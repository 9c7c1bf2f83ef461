"""
Target scoring geometry for Artemis.

Shots are stored as normalized coordinates: (0, 0) is the centre of the
face and a distance of 1.0 is its outer edge. All functions here are pure.

Boundary policy: a shot at distance exactly 1.0 is on the target and scores
in the outermost ring. Anything further out is a miss and scores 0. Whether
misses are recorded at all is decided by the caller (see OffTargetPolicy).
"""

import math
from enum import Enum
from typing import TYPE_CHECKING

from src.utils.constants import (
    MAX_SCORE,
    MISS_SCORE,
    PRACTICE_COLORS,
    RING_BAND_COLORS,
    RING_COUNT,
    RINGS_PER_BAND,
    TARGET_RADIUS_UNITS,
)

if TYPE_CHECKING:
    from src.models.shot import Shot


class OffTargetPolicy(str, Enum):
    """What to do with a placement outside the target face."""
    RECORD = "record"   # keep it as a score-0 miss
    IGNORE = "ignore"   # drop it, nothing is recorded


def is_on_target(x: float, y: float) -> bool:
    """True when (x, y) lies on the face, edge included."""
    return math.hypot(x, y) <= 1.0


def calculate_score(x: float, y: float, ring_count: int = RING_COUNT) -> int:
    """Score a normalized position.

    The face is split into ``ring_count`` equal-width rings by distance from
    the centre. The innermost ring scores MAX_SCORE and each ring outwards
    scores one less. The outer edge itself belongs to the last ring.

    Args:
        x: Horizontal offset from centre, in target radii.
        y: Vertical offset from centre, in target radii.
        ring_count: Number of scoring rings on the face.

    Returns:
        Integer score in [0, MAX_SCORE]. 0 for misses and for NaN input.
    """
    distance = math.hypot(x, y)
    # Written so NaN falls through to a miss instead of reaching floor()
    if not distance <= 1.0:
        return MISS_SCORE

    ring = min(math.floor(distance * ring_count), ring_count - 1)
    return max(MISS_SCORE, MAX_SCORE - ring)


def distance_from_center(shot: "Shot", target_radius: float = TARGET_RADIUS_UNITS) -> float:
    """Physical distance of a shot from the target centre."""
    return math.hypot(shot.x, shot.y) * target_radius


def distance_between(
    first: "Shot",
    second: "Shot",
    target_radius: float = TARGET_RADIUS_UNITS,
) -> float:
    """Physical distance between two shots."""
    return math.hypot(first.x - second.x, first.y - second.y) * target_radius


def generate_ring_colors(ring_count: int = RING_COUNT) -> list[str]:
    """Face colours for each ring, outermost first.

    Two rings share each colour band; faces with more rings than bands
    reuse the outermost band colour.
    """
    colors = []
    for ring_index in range(ring_count):
        band = min(ring_index // RINGS_PER_BAND, len(RING_BAND_COLORS) - 1)
        colors.append(RING_BAND_COLORS[band])
    colors.reverse()
    return colors


def practice_color(index: int) -> str:
    """Overlay marker colour for the practice at ``index``, cycling the palette."""
    return PRACTICE_COLORS[index % len(PRACTICE_COLORS)]


def normalize_click(px: float, py: float, width: float, height: float) -> tuple[float, float]:
    """Convert a pixel click on a target widget to normalized coordinates.

    The widget's centre is the target centre and half its width is the
    target radius, so clicks in the corners of a square widget land
    outside the face (distance > 1).
    """
    radius = width / 2
    if radius <= 0:
        return (0.0, 0.0)
    return ((px - width / 2) / radius, (py - height / 2) / radius)
