from datetime import datetime

import pytest


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_reviewer.db")
    return db_path


@pytest.fixture
def now():
    """A fixed mid-afternoon instant so date arithmetic is predictable."""
    return datetime(2024, 3, 10, 15, 30, 0)
