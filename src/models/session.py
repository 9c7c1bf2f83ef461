"""
Practice session model for Artemis.

A practice session is the round being recorded: a template of empty ends
that fills up shot by shot. It becomes a Round only once every end is
complete. The session is a plain object owned by whoever drives it;
nothing here is global.

Calls that don't make sense in the current state (a shot on a full end,
undo on an empty end, finalizing an unfinished session) are no-ops.
"""

import logging
from typing import Optional

from src.models.end import End
from src.models.round import Round
from src.models.shot import Shot
from src.scoring import OffTargetPolicy, is_on_target
from src.stats import average
from src.utils.constants import (
    DEFAULT_ENDS_PER_ROUND,
    MAX_ENDS,
    MIN_ENDS,
    SHOTS_PER_END,
)

logger = logging.getLogger(__name__)


def clamp_ends(value) -> int:
    """Clamp a requested end count into [MIN_ENDS, MAX_ENDS]."""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return MIN_ENDS
    return max(MIN_ENDS, min(MAX_ENDS, value))


class PracticeSession:
    """The round currently being recorded.

    Attributes:
        ends: One End per slot in the round, in shooting order.
        current_end_index: The end that placements and undos apply to.
        off_target_policy: Whether placements off the face are recorded
            as score-0 misses or dropped.
    """

    def __init__(
        self,
        ends_per_round: int = DEFAULT_ENDS_PER_ROUND,
        shots_per_end: int = SHOTS_PER_END,
        off_target_policy: OffTargetPolicy | str = OffTargetPolicy.RECORD,
    ):
        self.shots_per_end = shots_per_end
        self.off_target_policy = OffTargetPolicy(off_target_policy)
        self._ends_per_round = clamp_ends(ends_per_round)
        self.ends: list[End] = []
        self.current_end_index = 0
        self.reset()

    # =========================================================================
    # Template
    # =========================================================================

    def _empty_end(self) -> End:
        return End(shots_per_end=self.shots_per_end)

    def reset(self):
        """Discard all recorded shots and start a fresh template."""
        self.ends = [self._empty_end() for _ in range(self._ends_per_round)]
        self.current_end_index = 0

    @property
    def ends_per_round(self) -> int:
        return self._ends_per_round

    def set_ends_per_round(self, value) -> int:
        """Change the number of ends mid-session.

        Ends that stay in range keep their shots; new slots get empty ends
        and a shrink drops ends from the tail. Returns the clamped count.
        """
        count = clamp_ends(value)
        kept = self.ends[:count]
        kept.extend(self._empty_end() for _ in range(count - len(kept)))
        self.ends = kept
        self._ends_per_round = count
        self.current_end_index = min(self.current_end_index, count - 1)
        logger.debug(f"Ends per round set to {count}")
        return count

    # =========================================================================
    # Recording
    # =========================================================================

    @property
    def current_end(self) -> End:
        return self.ends[self.current_end_index]

    def select_end(self, index: int) -> bool:
        """Make another end current. Out-of-range indices are ignored."""
        if not 0 <= index < len(self.ends):
            return False
        self.current_end_index = index
        return True

    def place_shot(self, x: float, y: float) -> Optional[Shot]:
        """Score a placement and add it to the current end.

        Returns the recorded Shot, or None when the end is already full or
        the placement is off the face under the IGNORE policy.
        """
        if self.current_end.is_complete:
            return None
        if self.off_target_policy is OffTargetPolicy.IGNORE and not is_on_target(x, y):
            logger.debug(f"Ignored off-target placement at ({x:.3f}, {y:.3f})")
            return None

        shot = Shot.at(x, y)
        self.add_shot(shot)
        return shot

    def add_shot(self, shot: Shot) -> bool:
        """Add an already-scored shot to the current end."""
        return self.current_end.add_shot(shot)

    def undo_last_shot(self) -> Optional[Shot]:
        """Remove the most recent shot of the current end."""
        return self.current_end.undo_last_shot()

    def reset_end(self):
        """Clear every shot of the current end."""
        self.current_end.clear()

    def advance_end(self) -> int:
        """Move on once the current end is complete.

        Jumps to the next incomplete end after the current one, or to the
        following index when every later end is already full. Returns the
        new current index (unchanged if the current end isn't complete).
        """
        if not self.current_end.is_complete:
            return self.current_end_index

        for index in range(self.current_end_index + 1, len(self.ends)):
            if not self.ends[index].is_complete:
                self.current_end_index = index
                return index

        self.current_end_index = min(self.current_end_index + 1, len(self.ends) - 1)
        return self.current_end_index

    # =========================================================================
    # Completion
    # =========================================================================

    @property
    def is_complete(self) -> bool:
        return (
            len(self.ends) == self._ends_per_round
            and all(end.is_complete for end in self.ends)
        )

    @property
    def total_score(self) -> int:
        return sum(end.end_score for end in self.ends)

    @property
    def num_shots(self) -> int:
        return sum(len(end) for end in self.ends)

    def finalize(self, notes: str = "") -> Optional[Round]:
        """Turn a complete session into a Round.

        Returns None while any end is incomplete. The session itself is left
        untouched; call reset() once the round has been stored.
        """
        if not self.is_complete:
            return None
        round_ = Round.create(self.ends, notes=notes.strip())
        logger.info(
            f"Round finalized: id={round_.id}, ends={round_.num_ends}, "
            f"total={round_.total_score}"
        )
        return round_

    def get_stats(self) -> dict:
        """Live statistics for the shots recorded so far."""
        shots = [shot for end in self.ends for shot in end.shots]
        if not shots:
            return {}

        precisions = [end.precision for end in self.ends if end.precision > 0]
        return {
            "num_shots": len(shots),
            "ends_complete": sum(1 for end in self.ends if end.is_complete),
            "total_score": self.total_score,
            "avg_score": round(average(s.score for s in shots), 2),
            "avg_precision": round(average(precisions), 2),
            "missed": sum(1 for s in shots if s.is_miss),
        }
