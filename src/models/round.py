"""
Round model for Artemis.

A round is one completed practice session: a fixed number of complete ends.
A round holds sealed copies of its ends and its ends cannot be replaced, so
only the notes may change after the round has been built.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from src.models.end import End
from src.models.shot import Shot


def new_round_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Round:
    """A saved practice session.

    Attributes:
        ends: The round's ends, in shooting order.
        id: Unique identifier (also the storage key).
        created_at: When the round was finalized.
        notes: Free-text notes, editable after saving.
    """
    ends: tuple[End, ...]
    id: str = field(default_factory=new_round_id)
    created_at: datetime = field(default_factory=datetime.now)
    notes: str = ""

    def __post_init__(self):
        object.__setattr__(self, "ends", tuple(end.sealed() for end in self.ends))

    def __setattr__(self, name, value):
        if name == "ends" and "ends" in self.__dict__:
            raise AttributeError("the ends of a round cannot be replaced")
        super().__setattr__(name, value)

    @classmethod
    def create(cls, ends: Iterable[End], notes: str = "") -> "Round":
        """Build a new round from the given ends."""
        return cls(ends=tuple(ends), notes=notes)

    @property
    def total_score(self) -> int:
        return sum(end.end_score for end in self.ends)

    @property
    def shots(self) -> list[Shot]:
        """All shots in the round, end by end."""
        return [shot for end in self.ends for shot in end.shots]

    @property
    def num_ends(self) -> int:
        return len(self.ends)

    @property
    def best_end_score(self) -> int:
        return max((end.end_score for end in self.ends), default=0)
