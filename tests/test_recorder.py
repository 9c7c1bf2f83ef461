"""
Tests for the practice recording flow.

The store is mocked so failures can be injected; the session and the
saved history must stay unchanged whenever the store fails.
"""

from unittest.mock import MagicMock

import pytest

from conftest import make_round, scores_of, try_to_edit
from src.database.store import PersistenceError
from src.models.session import PracticeSession
from src.recorder import PracticeRecorder


def make_recorder(ends=2, store=None):
    store = store or MagicMock()
    return PracticeRecorder(store, "alice", session=PracticeSession(ends_per_round=ends))


def shoot(recorder, n, x=0.0, y=0.0):
    for _ in range(n):
        recorder.on_shot_placed(x, y)


class TestRecording:
    """Shot placement through the recorder."""

    def test_shot_recorded_signal(self, qtbot):
        recorder = make_recorder()
        with qtbot.waitSignal(recorder.shot_recorded) as blocker:
            recorder.on_shot_placed(0.2, 0)
        assert blocker.args[0].score == 8

    def test_advances_after_full_end(self, qtbot):
        recorder = make_recorder(ends=3)
        changes = []
        recorder.end_changed.connect(changes.append)
        shoot(recorder, 3)
        assert recorder.session.current_end_index == 1
        assert changes == [1]

    def test_round_completed_once(self, qtbot):
        recorder = make_recorder(ends=2)
        completed = []
        recorder.round_completed.connect(lambda: completed.append(True))
        shoot(recorder, 8)
        assert recorder.session.is_complete
        assert completed == [True]

    def test_undo(self, qtbot):
        recorder = make_recorder()
        recorder.on_shot_placed(0, 0)
        with qtbot.waitSignal(recorder.shot_undone):
            recorder.undo()
        assert recorder.session.num_shots == 0

    def test_set_ends_per_round_preserves_shots(self, qtbot):
        recorder = make_recorder(ends=2)
        shoot(recorder, 1)
        recorder.set_ends_per_round(5)
        assert recorder.session.ends[0].end_score == 10
        assert len(recorder.session.ends) == 5


class TestSaveRound:
    """Finalizing and storing the round."""

    def test_incomplete_not_saved(self, qtbot):
        store = MagicMock()
        recorder = make_recorder(store=store)
        shoot(recorder, 2)
        assert recorder.save_round() is None
        store.save_round.assert_not_called()

    def test_successful_save(self, qtbot):
        store = MagicMock()
        recorder = make_recorder(ends=2, store=store)
        shoot(recorder, 6)
        with qtbot.waitSignal(recorder.round_saved) as blocker:
            saved = recorder.save_round("morning")
        assert blocker.args[0] is saved
        store.save_round.assert_called_once_with("alice", saved)
        assert saved.total_score == 60
        assert saved.notes == "morning"
        assert recorder.saved_rounds == [saved]
        assert recorder.session.num_shots == 0

    def test_saved_round_is_read_only(self, qtbot):
        recorder = make_recorder(ends=1)
        shoot(recorder, 3)
        saved = recorder.save_round()
        try_to_edit(recorder.saved_rounds[0])
        assert saved.total_score == 30
        assert [len(end) for end in saved.ends] == [3]
        assert saved.ends[0].precision == 0

    def test_session_reuse_leaves_saved_round_alone(self, qtbot):
        recorder = make_recorder(ends=1)
        shoot(recorder, 3)
        saved = recorder.save_round()
        before = scores_of(saved)
        shoot(recorder, 2, 0.5, 0)
        assert scores_of(saved) == before

    def test_failed_save_keeps_state(self, qtbot):
        store = MagicMock()
        store.save_round.side_effect = PersistenceError("disk full")
        recorder = make_recorder(ends=2, store=store)
        shoot(recorder, 6)

        with qtbot.waitSignal(recorder.save_failed) as blocker:
            assert recorder.save_round() is None
        assert "disk full" in blocker.args[0]
        assert recorder.session.is_complete
        assert recorder.session.num_shots == 6
        assert recorder.saved_rounds == []

    def test_retry_after_failure(self, qtbot):
        store = MagicMock()
        store.save_round.side_effect = [PersistenceError("offline"), None]
        recorder = make_recorder(ends=1, store=store)
        shoot(recorder, 3)
        assert recorder.save_round() is None
        assert recorder.save_round() is not None
        assert len(recorder.saved_rounds) == 1


class TestHistory:
    """Loading, editing and deleting saved rounds."""

    def _recorder_with_history(self):
        store = MagicMock()
        rounds = [make_round([(0, 0)]), make_round([(0.5, 0)])]
        store.load_rounds.return_value = rounds
        recorder = make_recorder(store=store)
        assert recorder.load_history()
        return recorder, store, rounds

    def test_load_history(self, qtbot):
        recorder, store, rounds = self._recorder_with_history()
        store.load_rounds.assert_called_once_with("alice")
        assert {r.id for r in recorder.saved_rounds} == {r.id for r in rounds}

    def test_load_failure(self, qtbot):
        store = MagicMock()
        store.load_rounds.side_effect = PersistenceError("offline")
        recorder = make_recorder(store=store)
        assert not recorder.load_history()
        assert recorder.saved_rounds == []

    def test_update_notes(self, qtbot):
        recorder, store, rounds = self._recorder_with_history()
        assert recorder.update_notes(rounds[0].id, "better")
        store.update_notes.assert_called_once_with("alice", rounds[0].id, "better")
        assert rounds[0].notes == "better"

    def test_update_notes_failure(self, qtbot):
        recorder, store, rounds = self._recorder_with_history()
        store.update_notes.side_effect = PersistenceError("offline")
        assert not recorder.update_notes(rounds[0].id, "better")
        assert rounds[0].notes == ""

    def test_delete(self, qtbot):
        recorder, store, rounds = self._recorder_with_history()
        assert recorder.delete_round(rounds[1].id)
        store.delete_round.assert_called_once_with("alice", rounds[1].id)
        assert [r.id for r in recorder.saved_rounds] == [rounds[0].id]

    def test_delete_failure_keeps_round(self, qtbot):
        recorder, store, rounds = self._recorder_with_history()
        store.delete_round.side_effect = PersistenceError("offline")
        assert not recorder.delete_round(rounds[1].id)
        assert len(recorder.saved_rounds) == 2

    def test_unknown_round(self, qtbot):
        recorder, store, _ = self._recorder_with_history()
        assert not recorder.delete_round("nope")
        store.delete_round.assert_not_called()

    def test_aggregate_subset(self, qtbot):
        recorder, _, rounds = self._recorder_with_history()
        assert recorder.aggregate_stats().shot_count == 2
        subset = recorder.aggregate_stats({rounds[1].id})
        assert subset.shot_count == 1
        assert subset.average_score == pytest.approx(5)


class TestWithDatabase:
    """Full flow against the real SQLite store."""

    def test_record_save_reload(self, qtbot, db):
        recorder = PracticeRecorder(db, "alice", session=PracticeSession(ends_per_round=2))
        shoot(recorder, 6, 0.15, 0)
        saved = recorder.save_round()

        fresh = PracticeRecorder(db, "alice")
        assert fresh.load_history()
        assert [r.id for r in fresh.saved_rounds] == [saved.id]
        assert fresh.saved_rounds[0].total_score == 54
