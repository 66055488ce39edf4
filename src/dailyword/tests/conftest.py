"""Test configuration."""
import os
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv
from sqlalchemy.orm import Session

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from dailyword.config import GameSettings
from dailyword.models.base import SessionLocal, reset_db
from dailyword.services.word_calendar import WordCalendar

EPOCH = date(2024, 2, 3)
TEST_WORDS = ("apple", "crane", "sound", "house", "eerie")
TEST_DICTIONARY = TEST_WORDS + ("paper", "pleat", "sassy", "stone", "tests", "slate", "melee")


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    reset_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def calendar() -> WordCalendar:
    """Small calendar: apple on the epoch, crane the day after, and so on."""
    return WordCalendar(epoch=EPOCH, words=TEST_WORDS)


@pytest.fixture
def game_settings() -> GameSettings:
    """Game settings with a fixed epoch and no disqualified players."""
    return GameSettings(epoch=EPOCH, disqualified_ids=frozenset())


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def next_day(self) -> None:
        self.now += timedelta(days=1)


@pytest.fixture
def clock() -> FixedClock:
    """Morning of the epoch day, when the word is "apple"."""
    return FixedClock(datetime(2024, 2, 3, 9, 30, tzinfo=UTC))
