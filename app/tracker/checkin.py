"""Daily mood check-in description codec.

A check-in is stored as a record whose description packs three segments:

    "{score}|{notes}|{emotion,emotion,...}"

Notes are free text and may themselves contain "|", so the first segment is
always the score, the last is the emotion list and everything between is
notes. Decoding never raises.
"""

from __future__ import annotations

from app.tracker.models import CheckIn

DEFAULT_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10

EMOTION_OPTIONS: list[str] = [
    "happy",
    "energetic",
    "calm",
    "grateful",
    "motivated",
    "tired",
    "stressed",
    "anxious",
    "sad",
    "frustrated",
]


def score_label(score: int) -> str:
    if score <= 2:
        return "Poor"
    if score <= 4:
        return "Below Average"
    if score <= 6:
        return "Average"
    if score <= 8:
        return "Good"
    return "Excellent"


def encode_checkin(checkin: CheckIn) -> str:
    emotions = ",".join(e.strip() for e in checkin.emotions if e.strip())
    return f"{checkin.score}|{checkin.notes}|{emotions}"


def _parse_score(raw: str) -> int:
    try:
        score = int(raw.strip())
    except ValueError:
        return DEFAULT_SCORE
    return min(max(score, MIN_SCORE), MAX_SCORE)


def decode_checkin(text: str | None) -> CheckIn:
    """Unpack a check-in description. Missing pieces fall back to defaults."""
    if not text:
        return CheckIn()

    parts = text.split("|")
    head = parts[0].strip()
    if len(parts) <= 2 and not head.isdigit() and (head or len(parts) == 1):
        # Plain text typed straight into the description.
        return CheckIn(notes=text)

    score = _parse_score(parts[0])
    if len(parts) == 1:
        return CheckIn(score=score)
    if len(parts) == 2:
        return CheckIn(score=score, notes=parts[1])

    notes = "|".join(parts[1:-1])
    emotions = [e.strip() for e in parts[-1].split(",") if e.strip()]
    return CheckIn(score=score, notes=notes, emotions=emotions)
