"""User settings stored as key/value rows."""
import logging

from study_reviewer.db import get_connection
from study_reviewer.stats import DEFAULT_SECONDS_PER_CARD

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_LIMIT = 20
DEFAULT_RETENTION_WINDOW = 50


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def _get_positive_int(db_path: str, key: str, default: int) -> int:
    raw = get_setting(db_path, key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer setting %s=%r, using %d", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive setting %s=%d, using %d", key, value, default)
        return default
    return value


def get_seconds_per_card(db_path: str) -> int:
    return _get_positive_int(db_path, "seconds_per_card", DEFAULT_SECONDS_PER_CARD)


def get_queue_limit(db_path: str) -> int:
    return _get_positive_int(db_path, "queue_limit", DEFAULT_QUEUE_LIMIT)


def get_retention_window(db_path: str) -> int:
    """How many of the most recent grades feed the retention rate."""
    return _get_positive_int(db_path, "retention_window", DEFAULT_RETENTION_WINDOW)
