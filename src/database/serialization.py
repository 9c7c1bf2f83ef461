"""
Document format for exchanging rounds as JSON.

Each round is one document:

    {
        "id": "...",
        "createdAt": "2026-10-18T15:04:00",
        "totalScore": 245,
        "notes": "",
        "round": {
            "end01": {"shot1": {"x": 0.1, "y": -0.2, "score": 8}, ...},
            ...
        }
    }

Hydration is tolerant of older or damaged documents: missing coordinates
become 0, shots stored as a bare number are kept as that score at the
centre, and end score, precision and total are always recomputed from the
shots rather than read back.
"""

import logging
import math
from datetime import datetime
from typing import Any, Optional

from src.models.end import End
from src.models.round import Round, new_round_id
from src.models.shot import Shot
from src.utils.constants import SHOTS_PER_END

logger = logging.getLogger(__name__)


def coerce_number(value: Any, default: float = 0) -> float:
    """Return value if it is a usable number, otherwise default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into a naive local datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def end_key(index: int) -> str:
    return f"end{index + 1:02d}"


def shot_key(index: int) -> str:
    return f"shot{index + 1}"


def _slot_number(key: str) -> int:
    digits = "".join(ch for ch in key if ch.isdigit())
    return int(digits) if digits else 0


def round_to_document(round_: Round) -> dict:
    """Serialize a round to its storage document."""
    ends = {}
    for end_index, end in enumerate(round_.ends):
        ends[end_key(end_index)] = {
            shot_key(shot_index): {"x": shot.x, "y": shot.y, "score": shot.score}
            for shot_index, shot in enumerate(end.shots)
        }
    return {
        "id": round_.id,
        "createdAt": round_.created_at.isoformat(),
        "totalScore": round_.total_score,
        "notes": round_.notes,
        "round": ends,
    }


def shot_from_entry(entry: Any) -> Optional[Shot]:
    """Hydrate one stored shot, or None if the entry isn't a shot at all."""
    if isinstance(entry, (int, float)) and not isinstance(entry, bool):
        return Shot(x=0.0, y=0.0, score=int(coerce_number(entry)))
    if isinstance(entry, dict) and "score" in entry:
        return Shot(
            x=float(coerce_number(entry.get("x"))),
            y=float(coerce_number(entry.get("y"))),
            score=int(coerce_number(entry.get("score"))),
        )
    return None


def end_from_entries(entries: Any, shots_per_end: int = SHOTS_PER_END) -> End:
    """Hydrate an end from its shot map (or list), in shot order."""
    if isinstance(entries, dict):
        keys = sorted((k for k in entries if k.startswith("shot")), key=_slot_number)
        ordered = [entries[k] for k in keys]
    elif isinstance(entries, list):
        ordered = entries
    else:
        ordered = []
    shots = [s for s in (shot_from_entry(e) for e in ordered) if s is not None]
    return End(shots[:shots_per_end], shots_per_end=shots_per_end)


def round_from_document(doc: dict, shots_per_end: int = SHOTS_PER_END) -> Round:
    """Hydrate a round from a storage document.

    Also accepts the flat form {"ends": [{"shots": [...]}, ...]} written by
    early versions of the app.
    """
    if isinstance(doc.get("round"), dict):
        stored_ends = doc["round"]
        ends = [
            end_from_entries(stored_ends[k], shots_per_end)
            for k in sorted((k for k in stored_ends if k.startswith("end")), key=_slot_number)
        ]
    else:
        ends = [
            end_from_entries(e.get("shots", []) if isinstance(e, dict) else [], shots_per_end)
            for e in doc.get("ends") or []
        ]

    created_at = parse_timestamp(doc.get("createdAt")) or datetime.now()
    round_ = Round(
        ends=tuple(ends),
        id=str(doc.get("id") or new_round_id()),
        created_at=created_at,
        notes=str(doc.get("notes") or ""),
    )

    stored_total = doc.get("totalScore")
    if stored_total is not None and stored_total != round_.total_score:
        logger.warning(
            f"Round {round_.id}: stored total {stored_total} does not match "
            f"shots ({round_.total_score}), using recomputed value"
        )
    return round_


def rounds_from_documents(docs: list) -> list[Round]:
    """Hydrate every document that looks like a round, skipping the rest."""
    rounds = []
    for doc in docs:
        if not isinstance(doc, dict) or not ("round" in doc or "ends" in doc):
            logger.warning("Skipping entry that is not a stored round")
            continue
        rounds.append(round_from_document(doc))
    return rounds
