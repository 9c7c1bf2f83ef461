"""
Persistence contract for saved rounds.

Any backing store keyed by user id and round id can hold practice history
as long as it offers these five operations. Failures are reported by
raising PersistenceError; stores never retry on their own.
"""

from typing import Protocol, Sequence

from src.models.round import Round


class PersistenceError(Exception):
    """A store operation failed; nothing was changed by the caller."""


class RoundStore(Protocol):
    def save_round(self, user_id: str, round_: Round) -> None:
        ...

    def save_rounds(self, user_id: str, rounds: Sequence[Round]) -> None:
        ...

    def load_rounds(self, user_id: str) -> list[Round]:
        """All of the user's rounds, newest first."""
        ...

    def update_notes(self, user_id: str, round_id: str, notes: str) -> None:
        ...

    def delete_round(self, user_id: str, round_id: str) -> None:
        ...
