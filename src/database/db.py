"""
SQLite database manager for Artemis.

Handles persistence of saved rounds and their shots, per user.
Database file: ~/.artemis/artemis.db
"""

import logging
import sqlite3
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from src.database.serialization import coerce_number, parse_timestamp
from src.database.store import PersistenceError
from src.models.end import End
from src.models.round import Round
from src.models.shot import Shot
from src.utils.config import Config
from src.utils.constants import SHOTS_PER_END

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema.sql"


class Database:
    """SQLite implementation of the RoundStore contract.

    Every sqlite3 error is logged and re-raised as PersistenceError. Writes
    run in a transaction, so a failed call leaves the stored data as it was.
    """

    def __init__(self, db_path: Optional[Path | str] = None,
                 shots_per_end: int = SHOTS_PER_END):
        self.db_path = db_path or Config.get_db_path()
        self.shots_per_end = shots_per_end
        self.conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _init_db(self):
        """Initialize database connection and create tables."""
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")

        # Create tables from schema
        schema = SCHEMA_FILE.read_text()
        self.conn.executescript(schema)
        self.conn.commit()
        logger.info(f"Database initialized at {self.db_path}")

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def _fail(self, action: str, error: Exception) -> PersistenceError:
        logger.error(f"Error {action}: {error}")
        return PersistenceError(f"Error {action}: {error}")

    # =========================================================================
    # Writes
    # =========================================================================

    def _write_round(self, user_id: str, round_: Round):
        # Stored as naive local time so the ISO text sorts chronologically
        created_at = parse_timestamp(round_.created_at) or datetime.now()
        self.conn.execute("""
            INSERT INTO rounds (id, user_id, created_at, total_score, num_ends, notes)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT (user_id, id) DO UPDATE SET
                created_at = excluded.created_at,
                total_score = excluded.total_score,
                num_ends = excluded.num_ends,
                notes = excluded.notes
        """, (
            round_.id, user_id, created_at.isoformat(),
            round_.total_score, round_.num_ends, round_.notes,
        ))
        self.conn.execute(
            "DELETE FROM shots WHERE user_id = ? AND round_id = ?",
            (user_id, round_.id),
        )
        self.conn.executemany("""
            INSERT INTO shots (user_id, round_id, end_index, shot_index, x, y, score)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, [
            (user_id, round_.id, end_index, shot_index, shot.x, shot.y, shot.score)
            for end_index, end in enumerate(round_.ends)
            for shot_index, shot in enumerate(end.shots)
        ])

    def save_round(self, user_id: str, round_: Round) -> None:
        """Save one round, replacing any stored round with the same id."""
        try:
            with self.conn:
                self._write_round(user_id, round_)
        except sqlite3.Error as e:
            raise self._fail("saving round", e) from e
        logger.info(f"Round saved: user={user_id}, id={round_.id}")

    def save_rounds(self, user_id: str, rounds: Sequence[Round]) -> None:
        """Save several rounds in one transaction (all or nothing)."""
        try:
            with self.conn:
                for round_ in rounds:
                    self._write_round(user_id, round_)
        except sqlite3.Error as e:
            raise self._fail("saving rounds", e) from e
        logger.info(f"{len(rounds)} rounds saved: user={user_id}")

    def update_notes(self, user_id: str, round_id: str, notes: str) -> None:
        """Replace only the notes of a stored round."""
        try:
            with self.conn:
                cur = self.conn.execute(
                    "UPDATE rounds SET notes = ? WHERE user_id = ? AND id = ?",
                    (notes, user_id, round_id),
                )
        except sqlite3.Error as e:
            raise self._fail("updating notes", e) from e
        if cur.rowcount == 0:
            raise PersistenceError(f"Round not found: {round_id}")

    def delete_round(self, user_id: str, round_id: str) -> None:
        """Delete a stored round and its shots."""
        try:
            with self.conn:
                self.conn.execute(
                    "DELETE FROM shots WHERE user_id = ? AND round_id = ?",
                    (user_id, round_id),
                )
                cur = self.conn.execute(
                    "DELETE FROM rounds WHERE user_id = ? AND id = ?",
                    (user_id, round_id),
                )
        except sqlite3.Error as e:
            raise self._fail("deleting round", e) from e
        if cur.rowcount == 0:
            raise PersistenceError(f"Round not found: {round_id}")
        logger.info(f"Round deleted: user={user_id}, id={round_id}")

    # =========================================================================
    # Reads
    # =========================================================================

    def load_rounds(self, user_id: str) -> list[Round]:
        """Load all of a user's rounds, newest first.

        Missing or non-numeric shot fields read back as 0, and every derived
        value (end score, precision, total) is rebuilt from the shots.
        """
        try:
            round_rows = self.conn.execute(
                "SELECT * FROM rounds WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
            shot_rows = self.conn.execute("""
                SELECT round_id, end_index, shot_index, x, y, score
                FROM shots WHERE user_id = ?
                ORDER BY round_id, end_index, shot_index
            """, (user_id,)).fetchall()
        except sqlite3.Error as e:
            raise self._fail("loading rounds", e) from e

        shots_by_end: dict[str, dict[int, list[Shot]]] = defaultdict(lambda: defaultdict(list))
        for r in shot_rows:
            shots_by_end[r["round_id"]][r["end_index"]].append(Shot(
                x=float(coerce_number(r["x"])),
                y=float(coerce_number(r["y"])),
                score=int(coerce_number(r["score"])),
            ))

        rounds = []
        for r in round_rows:
            stored = shots_by_end.get(r["id"], {})
            num_ends = max([r["num_ends"] or 0] + [i + 1 for i in stored])
            ends = tuple(
                End(stored.get(i, [])[:self.shots_per_end], shots_per_end=self.shots_per_end)
                for i in range(num_ends)
            )
            rounds.append(Round(
                ends=ends,
                id=r["id"],
                created_at=parse_timestamp(r["created_at"]) or datetime.now(),
                notes=r["notes"] or "",
            ))

        logger.debug(f"Loaded {len(rounds)} rounds for user={user_id}")
        return rounds

    def get_round(self, user_id: str, round_id: str) -> Optional[Round]:
        """Load a single round by id."""
        for round_ in self.load_rounds(user_id):
            if round_.id == round_id:
                return round_
        return None
