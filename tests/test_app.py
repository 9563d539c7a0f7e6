from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from study_reviewer.app import (
    SessionExitRequested, cmd_add, cmd_delete, cmd_review, cmd_settings, main,
    run_review_session, session_int_prompt, session_prompt,
)
from study_reviewer.db import init_db
from study_reviewer.flashcards import add_card, get_card, get_recent_grades, load_cards
from study_reviewer.settings import get_setting


def seed_due_cards(db_path, count):
    created = datetime.now() - timedelta(days=2)
    return [add_card(db_path, f"Q{i}", f"A{i}", now=created) for i in range(count)]


def test_session_prompt_raises_on_q():
    with patch("study_reviewer.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("study_reviewer.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("study_reviewer.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


def test_session_int_prompt_returns_normal_input():
    with patch("study_reviewer.app.Prompt.ask", return_value="3"):
        assert session_int_prompt("rate", choices=["0", "1", "2", "3", "4", "5"]) == 3


def test_session_int_prompt_retries_until_valid():
    with patch("study_reviewer.app.Prompt.ask", side_effect=["7", "x", "5"]):
        assert session_int_prompt("rate", choices=["0", "1", "2", "3", "4", "5"]) == 5


def test_session_int_prompt_raises_on_q():
    with patch("study_reviewer.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_int_prompt("rate", choices=["0", "1", "2", "3", "4", "5"])


def test_run_review_session_empty(tmp_db):
    init_db(tmp_db)
    assert run_review_session(tmp_db, []) == 0


def test_run_review_session_grades_each_card(tmp_db):
    init_db(tmp_db)
    cards = seed_due_cards(tmp_db, 2)
    with patch("study_reviewer.app.Prompt.ask", side_effect=["", "4", "", "1"]):
        assert run_review_session(tmp_db, cards) == 2
    assert get_recent_grades(tmp_db) == [1, 4]
    assert get_card(tmp_db, cards[0].id).state.repetitions == 1
    assert get_card(tmp_db, cards[1].id).state.difficulty == 1


def test_run_review_session_exits_on_q(tmp_db):
    """First card is graded and saved, then 'q' on the second card's reveal."""
    init_db(tmp_db)
    cards = seed_due_cards(tmp_db, 2)
    with patch("study_reviewer.app.Prompt.ask", side_effect=["", "4", "q"]):
        with pytest.raises(SessionExitRequested):
            run_review_session(tmp_db, cards)
    assert get_card(tmp_db, cards[0].id).state.repetitions == 1
    assert get_card(tmp_db, cards[1].id).state.last_reviewed_at is None


def test_cmd_review_swallows_session_exit(tmp_db):
    init_db(tmp_db)
    seed_due_cards(tmp_db, 2)
    with patch("study_reviewer.app.Prompt.ask", side_effect=["q"]):
        cmd_review(tmp_db)
    assert get_recent_grades(tmp_db) == []


def test_cmd_add(tmp_db):
    init_db(tmp_db)
    with patch("study_reviewer.app.Prompt.ask", side_effect=["Front text", "Back text", "Python"]):
        cmd_add(tmp_db)
    cards = load_cards(tmp_db)
    assert len(cards) == 1
    assert cards[0].front == "Front text"
    assert cards[0].category == "Python"


def test_cmd_delete(tmp_db):
    init_db(tmp_db)
    card = seed_due_cards(tmp_db, 1)[0]
    with patch("study_reviewer.app.Prompt.ask", return_value=str(card.id)):
        cmd_delete(tmp_db)
    assert load_cards(tmp_db) == []


def test_cmd_settings_rejects_bad_value(tmp_db):
    init_db(tmp_db)
    with patch("study_reviewer.app.Prompt.ask", side_effect=["queue_limit", "-3"]):
        cmd_settings(tmp_db)
    assert get_setting(tmp_db, "queue_limit") is None
    with patch("study_reviewer.app.Prompt.ask", side_effect=["queue_limit", "8"]):
        cmd_settings(tmp_db)
    assert get_setting(tmp_db, "queue_limit") == "8"


def test_main_runs_commands_until_quit(tmp_db):
    with patch("study_reviewer.app.Prompt.ask", side_effect=["dashboard", "list", "bogus", "quit"]):
        main(["--db", tmp_db])


def test_main_reports_missing_card_and_continues(tmp_db):
    with patch("study_reviewer.app.Prompt.ask", side_effect=["delete", "99", "quit"]):
        main(["--db", tmp_db])
