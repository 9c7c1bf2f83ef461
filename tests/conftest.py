"""Shared fixtures for the Artemis test suite."""

import os

# Qt needs a platform plugin even for signal-only tests on headless CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from src.database.db import Database
from src.models.end import End
from src.models.round import Round
from src.models.shot import Shot


def make_end(*positions):
    """An end with shots at the given (x, y) positions."""
    return End([Shot.at(x, y) for x, y in positions])


def make_round(*ends, notes="", created_at=None):
    round_ = Round(ends=tuple(make_end(*positions) for positions in ends), notes=notes)
    if created_at is not None:
        round_.created_at = created_at
    return round_


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "artemis-test.db")
    yield database
    database.close()


def scores_of(round_):
    """Everything derived from a round's shots, for before/after comparison."""
    return (
        round_.total_score,
        [end.end_score for end in round_.ends],
        [end.precision for end in round_.ends],
        [end.shots for end in round_.ends],
    )


def try_to_edit(round_):
    """Attempt every shot mutation on every end of the round."""
    for end in round_.ends:
        end.add_shot(Shot.at(0, 0))
        end.undo_last_shot()
        end.clear()
        end.add_shot(Shot.at(0.9, 0.9))
