"""Data classes for the review domain model."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3


@dataclass(frozen=True)
class CardReviewState:
    """Scheduling-relevant fields of a flashcard."""
    repetitions: int
    ease_factor: float
    interval: int
    difficulty: int
    next_review_date: datetime
    last_reviewed_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Flashcard:
    id: int
    front: str
    back: str
    state: CardReviewState
    category: str = "General"
    created_at: Optional[str] = None


@dataclass(frozen=True)
class DifficultyHistogram:
    easy: int = 0
    medium: int = 0
    hard: int = 0


@dataclass(frozen=True)
class StatsReport:
    total_cards: int
    due_for_review: int
    reviewed_today: int
    difficulties: DifficultyHistogram
    average_ease_factor: float
    longest_streak: int


@dataclass(frozen=True)
class StreakReport:
    current: int = 0
    longest: int = 0


def initial_state(now: Optional[datetime] = None, card_id: Optional[int] = None) -> CardReviewState:
    """Review state for a freshly authored card: due one day after creation."""
    now = now or datetime.now()
    return CardReviewState(
        repetitions=0,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval=1,
        difficulty=0,
        next_review_date=now + timedelta(days=1),
        last_reviewed_at=None,
        id=card_id,
    )
