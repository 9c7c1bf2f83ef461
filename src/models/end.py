"""
End model for Artemis.

An end is the fixed-size batch of shots scored together. Its score and
precision are derived from the shots and refreshed after every change to
them; there is no way to set either one directly.

Ends that belong to a saved round are sealed: adding, undoing and clearing
shots on a sealed end changes nothing.
"""

from typing import Iterable, Optional

from src.models.shot import Shot
from src.stats import end_precision
from src.utils.constants import SHOTS_PER_END


class End:
    """An ordered batch of at most ``shots_per_end`` shots."""

    def __init__(self, shots: Iterable[Shot] = (), shots_per_end: int = SHOTS_PER_END):
        self.shots_per_end = shots_per_end
        self._shots: list[Shot] = list(shots)[:shots_per_end]
        self._end_score = 0
        self._precision = 0.0
        self._sealed = False
        self._recompute()

    def _recompute(self):
        self._end_score = sum(shot.score for shot in self._shots)
        self._precision = end_precision(self._shots)

    @property
    def shots(self) -> tuple[Shot, ...]:
        return tuple(self._shots)

    @property
    def end_score(self) -> int:
        """Sum of the shot scores."""
        return self._end_score

    @property
    def precision(self) -> float:
        """Mean distance of the shots from their own centroid (0 below 2 shots)."""
        return self._precision

    @property
    def is_complete(self) -> bool:
        return len(self._shots) >= self.shots_per_end

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def remaining(self) -> int:
        return max(0, self.shots_per_end - len(self._shots))

    def add_shot(self, shot: Shot) -> bool:
        """Append a shot. Returns False (and changes nothing) when full or sealed."""
        if self._sealed or self.is_complete:
            return False
        self._shots.append(shot)
        self._recompute()
        return True

    def undo_last_shot(self) -> Optional[Shot]:
        """Remove and return the most recent shot, or None when empty or sealed."""
        if self._sealed or not self._shots:
            return None
        shot = self._shots.pop()
        self._recompute()
        return shot

    def clear(self):
        """Remove every shot."""
        if self._sealed:
            return
        self._shots.clear()
        self._recompute()

    def copy(self) -> "End":
        return End(self._shots, shots_per_end=self.shots_per_end)

    def sealed(self) -> "End":
        """Return a read-only copy of this end."""
        end = self.copy()
        end._sealed = True
        return end

    def __len__(self) -> int:
        return len(self._shots)

    def __eq__(self, other) -> bool:
        if not isinstance(other, End):
            return NotImplemented
        return self._shots == other._shots and self.shots_per_end == other.shots_per_end

    def __repr__(self) -> str:
        return (
            f"End(shots={self._shots!r}, end_score={self._end_score}, "
            f"precision={self._precision:.3f})"
        )
