"""
Shot model for Artemis.

Shot: a single arrow placed on the target face. Its score is computed once
when the shot is created and never recomputed afterwards.
"""

from dataclasses import dataclass

from src.scoring import calculate_score, is_on_target


@dataclass(frozen=True)
class Shot:
    """A single arrow on the target.

    Attributes:
        x: Horizontal offset from centre in target radii (positive = right).
        y: Vertical offset from centre in target radii (positive = down,
           matching screen coordinates of the click).
        score: Ring score in [0, 10], 0 for a miss.
    """
    x: float
    y: float
    score: int

    @classmethod
    def at(cls, x: float, y: float) -> "Shot":
        """Create a shot at a normalized position, scoring it."""
        return cls(x=x, y=y, score=calculate_score(x, y))

    @property
    def is_miss(self) -> bool:
        return self.score == 0

    @property
    def on_target(self) -> bool:
        return is_on_target(self.x, self.y)
