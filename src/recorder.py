"""
Practice recording flow for Artemis.

PracticeRecorder connects a shot source (target clicks or the MockArcher)
to a PracticeSession, and the session to a RoundStore. The in-memory
state only changes after the store reports success: a failed save keeps
the session exactly as it was so the user can try again.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from src.database.store import PersistenceError, RoundStore
from src.models.round import Round
from src.models.session import PracticeSession
from src.stats import AggregateStats, compute_aggregate_stats, sort_newest_first

logger = logging.getLogger(__name__)


class PracticeRecorder(QObject):
    """Drives one user's practice session and saved history.

    Signals:
        shot_recorded(Shot): A placement was scored and added.
        shot_undone(Shot): The last shot of the current end was removed.
        end_changed(int): The current end index changed.
        round_completed(): Every end of the session is now full.
        round_saved(Round): The finished round was stored.
        save_failed(str): A store operation failed; nothing was changed.
        history_changed(): saved_rounds was reloaded or edited.
    """

    shot_recorded = pyqtSignal(object)
    shot_undone = pyqtSignal(object)
    end_changed = pyqtSignal(int)
    round_completed = pyqtSignal()
    round_saved = pyqtSignal(object)
    save_failed = pyqtSignal(str)
    history_changed = pyqtSignal()

    def __init__(self, store: RoundStore, user_id: str,
                 session: Optional[PracticeSession] = None, parent=None):
        super().__init__(parent)
        self.store = store
        self.user_id = user_id
        self.session = session or PracticeSession()
        self.saved_rounds: list[Round] = []

    # =========================================================================
    # Recording
    # =========================================================================

    def on_shot_placed(self, x: float, y: float):
        """Slot for shot sources: score and record a placement."""
        was_complete = self.session.is_complete
        shot = self.session.place_shot(x, y)
        if shot is None:
            return
        self.shot_recorded.emit(shot)

        if self.session.current_end.is_complete:
            index = self.session.current_end_index
            if self.session.advance_end() != index:
                self.end_changed.emit(self.session.current_end_index)
        if self.session.is_complete and not was_complete:
            logger.info("All ends complete, round ready to save")
            self.round_completed.emit()

    def undo(self):
        shot = self.session.undo_last_shot()
        if shot is not None:
            self.shot_undone.emit(shot)

    def select_end(self, index: int):
        if self.session.select_end(index):
            self.end_changed.emit(index)

    def set_ends_per_round(self, value) -> int:
        before = self.session.current_end_index
        count = self.session.set_ends_per_round(value)
        if self.session.current_end_index != before:
            self.end_changed.emit(self.session.current_end_index)
        return count

    def save_round(self, notes: str = "") -> Optional[Round]:
        """Finalize and store the session.

        Returns the saved Round, or None when the session is incomplete or
        the store failed (save_failed is emitted in that case).
        """
        round_ = self.session.finalize(notes)
        if round_ is None:
            return None

        try:
            self.store.save_round(self.user_id, round_)
        except PersistenceError as e:
            logger.error(f"Round not saved, session kept: {e}")
            self.save_failed.emit(str(e))
            return None

        self.saved_rounds.insert(0, round_)
        self.session.reset()
        self.round_saved.emit(round_)
        self.history_changed.emit()
        self.end_changed.emit(0)
        return round_

    # =========================================================================
    # History
    # =========================================================================

    def load_history(self) -> bool:
        """Replace saved_rounds with the store's copy. False on failure."""
        try:
            rounds = self.store.load_rounds(self.user_id)
        except PersistenceError as e:
            self.save_failed.emit(str(e))
            return False
        self.saved_rounds = sort_newest_first(rounds)
        self.history_changed.emit()
        return True

    def update_notes(self, round_id: str, notes: str) -> bool:
        round_ = self._find(round_id)
        if round_ is None:
            return False
        try:
            self.store.update_notes(self.user_id, round_id, notes)
        except PersistenceError as e:
            self.save_failed.emit(str(e))
            return False
        round_.notes = notes
        self.history_changed.emit()
        return True

    def delete_round(self, round_id: str) -> bool:
        round_ = self._find(round_id)
        if round_ is None:
            return False
        try:
            self.store.delete_round(self.user_id, round_id)
        except PersistenceError as e:
            self.save_failed.emit(str(e))
            return False
        self.saved_rounds.remove(round_)
        self.history_changed.emit()
        return True

    def aggregate_stats(self, round_ids: Optional[set[str]] = None) -> AggregateStats:
        """Aggregate over all saved rounds, or only the selected ones."""
        rounds = self.saved_rounds
        if round_ids is not None:
            rounds = [r for r in rounds if r.id in round_ids]
        return compute_aggregate_stats(rounds)

    def _find(self, round_id: str) -> Optional[Round]:
        return next((r for r in self.saved_rounds if r.id == round_id), None)
