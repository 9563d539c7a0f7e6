"""Dashboard figures gathered from the card store and review log."""
from datetime import datetime

from study_reviewer.flashcards import get_recent_grades, get_review_dates, load_cards
from study_reviewer.settings import get_retention_window, get_seconds_per_card
from study_reviewer.stats import estimate_study_time, retention_rate, review_streaks, study_stats


def get_retention_label(rate: int) -> str:
    if rate >= 90:
        return "EXCELLENT"
    elif rate >= 75:
        return "GOOD"
    elif rate >= 50:
        return "NEEDS WORK"
    return "STRUGGLING"


def get_retention_color(rate: int) -> str:
    if rate >= 90:
        return "green"
    elif rate >= 75:
        return "yellow"
    elif rate >= 50:
        return "dark_orange"
    return "red"


def get_dashboard(db_path: str, now: datetime | None = None) -> dict:
    now = now or datetime.now()
    stats = study_stats([c.state for c in load_cards(db_path)], now)
    grades = get_recent_grades(db_path, limit=get_retention_window(db_path))
    retention = retention_rate(grades)
    streaks = review_streaks(get_review_dates(db_path), now.date())
    return {
        "stats": stats,
        "retention_rate": retention,
        "retention_label": get_retention_label(retention),
        "grades_counted": len(grades),
        "current_streak": streaks.current,
        "longest_daily_streak": streaks.longest,
        "estimated_minutes": estimate_study_time(stats.due_for_review, get_seconds_per_card(db_path)),
    }
