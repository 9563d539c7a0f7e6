"""Review statistics: retention, difficulty breakdown, streaks."""
import math
from datetime import date, datetime, timedelta

from study_reviewer.models import (
    DEFAULT_EASE_FACTOR, DifficultyHistogram, StatsReport, StreakReport,
)
from study_reviewer.scheduler import is_due
from study_reviewer.sm2 import PASSING_GRADE, round_half_up

DEFAULT_SECONDS_PER_CARD = 10


def difficulty_label(difficulty: int) -> str:
    if difficulty <= 1:
        return "Easy"
    elif difficulty <= 3:
        return "Medium"
    return "Hard"


def difficulty_color(difficulty: int) -> str:
    if difficulty <= 1:
        return "green"
    elif difficulty <= 3:
        return "yellow"
    return "red"


def difficulty_histogram(cards) -> DifficultyHistogram:
    counts = {"Easy": 0, "Medium": 0, "Hard": 0}
    for card in cards:
        counts[difficulty_label(card.difficulty)] += 1
    return DifficultyHistogram(easy=counts["Easy"], medium=counts["Medium"], hard=counts["Hard"])


def _reviewed_on(card, day: date) -> bool:
    return card.last_reviewed_at is not None and card.last_reviewed_at.date() == day


def study_stats(cards, now: datetime) -> StatsReport:
    """Summarize a card collection for the dashboard.

    An empty collection is reported with an average ease of 2.5 (the
    starting ease of a new card) and a longest streak of 0.
    """
    cards = list(cards)
    if cards:
        average_ease = sum(c.ease_factor for c in cards) / len(cards)
        longest = max(c.repetitions for c in cards)
    else:
        average_ease = DEFAULT_EASE_FACTOR
        longest = 0
    return StatsReport(
        total_cards=len(cards),
        due_for_review=sum(1 for c in cards if is_due(c, now)),
        reviewed_today=sum(1 for c in cards if _reviewed_on(c, now.date())),
        difficulties=difficulty_histogram(cards),
        average_ease_factor=average_ease,
        longest_streak=longest,
    )


def retention_rate(grades) -> int:
    """Percentage (0-100) of grades that were successful recalls."""
    grades = list(grades)
    if not grades:
        return 0
    passed = sum(1 for g in grades if g >= PASSING_GRADE)
    return round_half_up(100 * passed / len(grades))


def estimate_study_time(card_count: int, seconds_per_card: float = DEFAULT_SECONDS_PER_CARD) -> int:
    """Minutes needed to get through ``card_count`` cards, rounded up."""
    return math.ceil(card_count * seconds_per_card / 60)


def retention_probability(days_since_review: float, ease_factor: float, initial_strength: float = 1.0) -> float:
    """Forgetting curve R(t) = e^(-t/S) with memory strength S = strength * ease."""
    strength = initial_strength * ease_factor
    probability = math.exp(-days_since_review / strength)
    return max(0.0, min(1.0, probability))


def review_streaks(review_dates, today: date) -> StreakReport:
    """Count consecutive calendar days with at least one review.

    A run ending yesterday is still the current streak.
    """
    days = {d.date() if isinstance(d, datetime) else d for d in review_dates}
    if not days:
        return StreakReport()

    longest = 0
    for day in days:
        if day - timedelta(days=1) in days:
            continue
        run = 1
        while day + timedelta(days=run) in days:
            run += 1
        longest = max(longest, run)

    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return StreakReport(current=0, longest=longest)
    current = 0
    while cursor in days:
        current += 1
        cursor -= timedelta(days=1)
    return StreakReport(current=current, longest=longest)
