from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from .models import PlayerScore

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def rank(scores: Iterable[PlayerScore]) -> List[PlayerScore]:
    """Sort by correct desc, wrong asc, skipped asc, then most recent first."""
    # Two passes: Python's sort is stable, so the timestamp order survives
    # among records whose counts tie.
    by_time = sorted(scores, key=_completed_at, reverse=True)
    return sorted(
        by_time, key=lambda s: (-s.correct_count, s.wrong_count, s.skipped_count)
    )


def _completed_at(score: PlayerScore) -> datetime:
    try:
        return datetime.strptime(score.completed_at.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        return datetime.min


def accuracy(score: int, questions_answered: int) -> int:
    if questions_answered <= 0:
        return 0
    # half up, so 5 of 8 shows 63 rather than the 62 of round-half-even
    return (score * 200 + questions_answered) // (2 * questions_answered)


def is_perfect_score(score: int, questions_answered: int) -> bool:
    return score > 0 and score == questions_answered


def completed_at_now(utc_offset_hours: int = 8) -> str:
    """Current time in a fixed UTC offset, independent of the server locale."""
    tz = timezone(timedelta(hours=utc_offset_hours))
    return datetime.now(tz).strftime(TIMESTAMP_FORMAT)
