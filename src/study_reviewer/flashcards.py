"""Flashcard storage and review sessions with SM-2 scheduling."""
import logging
import sqlite3
from datetime import datetime

from study_reviewer.db import get_connection, write_transaction
from study_reviewer.models import CardReviewState, Flashcard, initial_state
from study_reviewer.scheduler import build_queue
from study_reviewer.sm2 import transition, validate_grade

logger = logging.getLogger(__name__)


class CardNotFound(LookupError):
    def __init__(self, card_id: int):
        super().__init__(f"Flashcard {card_id} not found")
        self.card_id = card_id


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def row_to_state(row: sqlite3.Row) -> CardReviewState:
    return CardReviewState(
        repetitions=row["repetitions"],
        ease_factor=row["ease_factor"],
        interval=row["interval"],
        difficulty=row["difficulty"],
        next_review_date=_parse_ts(row["next_review"]),
        last_reviewed_at=_parse_ts(row["last_reviewed_at"]),
        id=row["id"],
    )


def row_to_card(row: sqlite3.Row) -> Flashcard:
    return Flashcard(
        id=row["id"],
        front=row["front"],
        back=row["back"],
        category=row["category"],
        created_at=row["created_at"],
        state=row_to_state(row),
    )


def add_card(db_path: str, front: str, back: str, category: str = "General", now: datetime | None = None) -> Flashcard:
    if not front.strip() or not back.strip():
        raise ValueError("Front and back text are required")
    now = now or datetime.now()
    state = initial_state(now)
    conn = get_connection(db_path)
    cur = conn.execute(
        """INSERT INTO flashcards
        (front, back, category, created_at, repetitions, ease_factor, interval, difficulty, next_review)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (front, back, category or "General", now.isoformat(), state.repetitions,
         state.ease_factor, state.interval, state.difficulty, state.next_review_date.isoformat()),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (cur.lastrowid,)).fetchone()
    conn.close()
    logger.info("Added flashcard %d (%s)", row["id"], row["category"])
    return row_to_card(row)


def get_card(db_path: str, card_id: int) -> Flashcard:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
    conn.close()
    if row is None:
        raise CardNotFound(card_id)
    return row_to_card(row)


def load_cards(db_path: str, category: str | None = None) -> list[Flashcard]:
    conn = get_connection(db_path)
    if category:
        rows = conn.execute(
            "SELECT * FROM flashcards WHERE category = ? ORDER BY id", (category,)
        ).fetchall()
    else:
        rows = conn.execute("SELECT * FROM flashcards ORDER BY id").fetchall()
    conn.close()
    return [row_to_card(r) for r in rows]


def get_categories(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT DISTINCT category FROM flashcards ORDER BY category").fetchall()
    conn.close()
    return [r["category"] for r in rows]


def get_review_queue(db_path: str, now: datetime | None = None, limit: int | None = None,
                     category: str | None = None) -> list[Flashcard]:
    """Due cards, earliest due first and hardest first among equals."""
    now = now or datetime.now()
    cards = {c.id: c for c in load_cards(db_path, category)}
    queue = build_queue([c.state for c in cards.values()], now, limit)
    return [cards[state.id] for state in queue]


def record_review(db_path: str, card_id: int, grade: int, now: datetime | None = None) -> Flashcard:
    """Grade a card and persist its next review state.

    The read, the transition and the write happen under one write lock, so
    concurrent gradings of the same card replace the whole record in turn.
    """
    grade = validate_grade(grade)
    now = now or datetime.now()
    conn = get_connection(db_path)
    try:
        with write_transaction(conn):
            row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
            if row is None:
                raise CardNotFound(card_id)
            updated = transition(grade, row_to_state(row), now)
            conn.execute(
                """UPDATE flashcards SET repetitions=?, ease_factor=?, interval=?, difficulty=?,
                next_review=?, last_reviewed_at=? WHERE id=?""",
                (updated.repetitions, updated.ease_factor, updated.interval, updated.difficulty,
                 updated.next_review_date.isoformat(), updated.last_reviewed_at.isoformat(), card_id),
            )
            conn.execute(
                "INSERT INTO review_log (flashcard_id, grade, reviewed_at) VALUES (?, ?, ?)",
                (card_id, grade, now.isoformat()),
            )
        row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
    finally:
        conn.close()
    logger.info("Card %d graded %d, next review in %d day(s)", card_id, grade, updated.interval)
    return row_to_card(row)


def delete_card(db_path: str, card_id: int) -> None:
    conn = get_connection(db_path)
    cur = conn.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
    conn.commit()
    conn.close()
    if cur.rowcount == 0:
        raise CardNotFound(card_id)


def get_recent_grades(db_path: str, limit: int = 50) -> list[int]:
    """Most recent grades first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT grade FROM review_log ORDER BY reviewed_at DESC, id DESC LIMIT ?", (limit,)
    ).fetchall()
    conn.close()
    return [r["grade"] for r in rows]


def get_review_dates(db_path: str) -> list[datetime]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT reviewed_at FROM review_log ORDER BY reviewed_at").fetchall()
    conn.close()
    return [datetime.fromisoformat(r["reviewed_at"]) for r in rows]
