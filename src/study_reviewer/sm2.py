"""SM-2 spaced repetition algorithm."""
import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from study_reviewer.models import CardReviewState, MIN_EASE_FACTOR

logger = logging.getLogger(__name__)

MIN_GRADE = 0
MAX_GRADE = 5
PASSING_GRADE = 3
MAX_DIFFICULTY = 5


class InvalidGrade(ValueError):
    """Raised when a grade outside 0-5 reaches the transition."""

    def __init__(self, grade):
        super().__init__(f"Grade must be an integer between {MIN_GRADE} and {MAX_GRADE}, got {grade!r}")
        self.grade = grade


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 rounding up."""
    return math.floor(value + 0.5)


def validate_grade(grade) -> int:
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise InvalidGrade(grade)
    if grade < MIN_GRADE or grade > MAX_GRADE:
        raise InvalidGrade(grade)
    return grade


def next_ease_factor(ease_factor: float, grade: int) -> float:
    new_ef = ease_factor + (0.1 - (5 - grade) * (0.08 + (5 - grade) * 0.02))
    if new_ef < MIN_EASE_FACTOR:
        new_ef = MIN_EASE_FACTOR
    return new_ef


def transition(grade: int, state: CardReviewState, now: datetime | None = None) -> CardReviewState:
    """Calculate the next review state for a card using SM-2.

    Args:
        grade: Recall quality 0-5 (0=complete blackout, 5=perfect)
        state: The card's current review state
        now: Time of the grading event (defaults to datetime.now())

    Returns:
        A new CardReviewState replacing ``state`` in full.

    Raises:
        InvalidGrade: if ``grade`` is not an integer in 0-5. Nothing is
            computed for a rejected grade.
    """
    grade = validate_grade(grade)
    now = now or datetime.now()

    # Ease moves on every grade, including failures
    new_ef = next_ease_factor(state.ease_factor, grade)

    if grade >= PASSING_GRADE:
        if state.repetitions == 0:
            new_interval = 1
        elif state.repetitions == 1:
            new_interval = 6
        else:
            new_interval = round_half_up(state.interval * new_ef)
        new_repetitions = state.repetitions + 1
        new_difficulty = max(state.difficulty - 1, 0)
    else:
        new_repetitions = 0
        new_interval = 1
        new_difficulty = min(state.difficulty + 1, MAX_DIFFICULTY)

    logger.debug(
        "grade=%d reps %d->%d interval %d->%d ease %.4f->%.4f",
        grade, state.repetitions, new_repetitions, state.interval, new_interval,
        state.ease_factor, new_ef,
    )
    return replace(
        state,
        repetitions=new_repetitions,
        ease_factor=new_ef,
        interval=new_interval,
        difficulty=new_difficulty,
        next_review_date=now + timedelta(days=new_interval),
        last_reviewed_at=now,
    )


def apply_grades(state: CardReviewState, grades, now: datetime | None = None) -> CardReviewState:
    """Fold a sequence of grades through ``transition``, all stamped at ``now``.

    Used for batch imports of review history; every grade is validated
    before the first transition so a bad entry leaves nothing half-applied.
    """
    grades = [validate_grade(g) for g in grades]
    now = now or datetime.now()
    for grade in grades:
        state = transition(grade, state, now)
    return state
