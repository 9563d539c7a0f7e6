# tests/test_dashboard.py
from datetime import timedelta

from study_reviewer.db import init_db
from study_reviewer.dashboard import get_dashboard, get_retention_color, get_retention_label
from study_reviewer.flashcards import add_card, record_review
from study_reviewer.settings import set_setting


def test_dashboard_empty(tmp_db, now):
    init_db(tmp_db)
    data = get_dashboard(tmp_db, now=now)
    assert data["stats"].total_cards == 0
    assert data["stats"].average_ease_factor == 2.5
    assert data["stats"].longest_streak == 0
    assert data["retention_rate"] == 0
    assert data["grades_counted"] == 0
    assert data["current_streak"] == 0
    assert data["estimated_minutes"] == 0


def test_retention_label():
    assert get_retention_label(95) == "EXCELLENT"
    assert get_retention_label(80) == "GOOD"
    assert get_retention_label(60) == "NEEDS WORK"
    assert get_retention_label(10) == "STRUGGLING"
    assert get_retention_color(95) == "green"
    assert get_retention_color(10) == "red"


def test_dashboard_with_reviews(tmp_db, now):
    init_db(tmp_db)
    cards = [add_card(tmp_db, f"Q{i}", f"A{i}", now=now - timedelta(days=3)) for i in range(8)]
    yesterday = now - timedelta(days=1)
    for card, grade in zip(cards[:3], [5, 2, 4]):
        record_review(tmp_db, card.id, grade, now=yesterday)
    for card, grade in zip(cards[3:5], [1, 5]):
        record_review(tmp_db, card.id, grade, now=now)

    data = get_dashboard(tmp_db, now=now)
    stats = data["stats"]
    assert stats.total_cards == 8
    # cards graded yesterday come due again today, alongside the 3 untouched ones
    assert stats.due_for_review == 6
    assert stats.reviewed_today == 2
    assert data["retention_rate"] == 60
    assert data["grades_counted"] == 5
    assert data["current_streak"] == 2
    assert data["longest_daily_streak"] == 2
    assert data["estimated_minutes"] == 1


def test_dashboard_respects_settings(tmp_db, now):
    init_db(tmp_db)
    cards = [add_card(tmp_db, f"Q{i}", f"A{i}", now=now - timedelta(days=3)) for i in range(13)]
    record_review(tmp_db, cards[0].id, 0, now=now - timedelta(minutes=5))
    record_review(tmp_db, cards[1].id, 5, now=now)
    set_setting(tmp_db, "retention_window", "1")
    set_setting(tmp_db, "seconds_per_card", "60")
    data = get_dashboard(tmp_db, now=now)
    assert data["grades_counted"] == 1
    assert data["retention_rate"] == 100
    assert data["estimated_minutes"] == 11
