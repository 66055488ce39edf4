"""Database models for the bot.

Storage holds only raw records. A game row keeps its guess list and nothing
derived from it; feedback, keyboard hints and status are recomputed on read.
"""
from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Integer,
    BigInteger,
    String,
    UniqueConstraint,
)

from dailyword.models.base import Base, TimestampMixin


class GameRecord(Base, TimestampMixin):
    """One player's game for one calendar day."""

    __tablename__ = "games"
    __table_args__ = (UniqueConstraint("player_id", "date", name="uq_games_player_date"),)

    id = Column(String(36), primary_key=True)
    player_id = Column(BigInteger, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    guesses = Column(JSON, nullable=False, default=list)
    user_data = Column(JSON, nullable=True)


class UserStatsRecord(Base, TimestampMixin):
    """Running statistics of a player."""

    __tablename__ = "user_stats"

    player_id = Column(BigInteger, primary_key=True)
    total_games = Column(Integer, nullable=False, default=0)
    total_wins = Column(Integer, nullable=False, default=0)
    total_losses = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)
    max_streak = Column(Integer, nullable=False, default=0)
    last_game_won_date = Column(Date, nullable=True)
    win_guess_counts = Column(JSON, nullable=False, default=dict)  # guess count -> games won
    last30 = Column(JSON, nullable=False, default=list)  # [{date, won, guess_count}], oldest first
    user_data = Column(JSON, nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class LeaderboardRecord(Base, TimestampMixin):
    """Materialized ranked leaderboard, a single row."""

    __tablename__ = "leaderboard"

    SINGLETON_ID = 1

    id = Column(Integer, primary_key=True, default=SINGLETON_ID)
    date = Column(Date, nullable=False)
    entries = Column(JSON, nullable=False, default=list)
    last_updated_at = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
