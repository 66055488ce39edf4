"""Repository for games, player statistics and the leaderboard."""
import logging
import uuid
from datetime import UTC, date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from dailyword.models.game_models import (
    Game,
    GameResult,
    Leaderboard,
    LeaderboardEntry,
    UserData,
    UserStats,
)
from dailyword.models.models import GameRecord, LeaderboardRecord, UserStatsRecord

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they were stored as UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class GameRepository:
    """Loads and saves game records through a database session.

    Every save commits. Storage errors propagate to the caller.
    """

    def __init__(self, db: Session):
        """Initialize the repository with a database session."""
        self.db = db

    # Games

    def _to_game(self, record: GameRecord) -> Game:
        return Game(
            id=record.id,
            player_id=record.player_id,
            date=record.date,
            guesses=list(record.guesses or []),
            user_data=UserData.from_dict(record.user_data),
        )

    def load_by_player_and_date(self, player_id: int, day: date) -> Optional[Game]:
        """Get a player's game for a day."""
        record = (
            self.db.query(GameRecord)
            .filter(GameRecord.player_id == player_id, GameRecord.date == day)
            .first()
        )
        return self._to_game(record) if record else None

    def load_by_id(self, game_id: str) -> Optional[Game]:
        """Get a game by its id."""
        record = self.db.get(GameRecord, game_id)
        return self._to_game(record) if record else None

    def load_all_by_player(self, player_id: int) -> List[Game]:
        """Get all games of a player, oldest first."""
        records = (
            self.db.query(GameRecord)
            .filter(GameRecord.player_id == player_id)
            .order_by(GameRecord.date)
            .all()
        )
        return [self._to_game(r) for r in records]

    def save(self, game: Game) -> str:
        """Insert or update a game and return its id.

        The id is assigned on first save and stays the same afterwards.
        """
        record = None
        if game.id is not None:
            record = self.db.get(GameRecord, game.id)
        if record is None:
            record = (
                self.db.query(GameRecord)
                .filter(GameRecord.player_id == game.player_id, GameRecord.date == game.date)
                .first()
            )
        if record is None:
            record = GameRecord(id=game.id or str(uuid.uuid4()), player_id=game.player_id, date=game.date)
            self.db.add(record)

        record.guesses = list(game.guesses)
        record.user_data = game.user_data.to_dict() if game.user_data else None
        self.db.commit()
        return record.id

    # Statistics

    def _to_stats(self, record: UserStatsRecord) -> UserStats:
        return UserStats(
            player_id=record.player_id,
            total_games=record.total_games,
            total_wins=record.total_wins,
            total_losses=record.total_losses,
            current_streak=record.current_streak,
            max_streak=record.max_streak,
            last_game_won_date=record.last_game_won_date,
            # JSON object keys come back as strings
            win_guess_counts={int(k): int(v) for k, v in (record.win_guess_counts or {}).items()},
            last30=[GameResult.from_dict(r) for r in (record.last30 or [])],
            user_data=UserData.from_dict(record.user_data),
        )

    def load_stats(self, player_id: int) -> Optional[UserStats]:
        """Get a player's statistics."""
        record = self.db.get(UserStatsRecord, player_id)
        return self._to_stats(record) if record else None

    def load_all_stats(self) -> List[UserStats]:
        """Get the statistics of every player."""
        return [self._to_stats(r) for r in self.db.query(UserStatsRecord).all()]

    def save_stats(self, stats: UserStats) -> UserStats:
        """Insert or update a player's statistics.

        Raises StaleDataError when the row changed since this session read it.
        """
        record = self.db.get(UserStatsRecord, stats.player_id)
        if record is None:
            record = UserStatsRecord(player_id=stats.player_id)
            self.db.add(record)

        record.total_games = stats.total_games
        record.total_wins = stats.total_wins
        record.total_losses = stats.total_losses
        record.current_streak = stats.current_streak
        record.max_streak = stats.max_streak
        record.last_game_won_date = stats.last_game_won_date
        record.win_guess_counts = {str(k): v for k, v in stats.win_guess_counts.items()}
        record.last30 = [r.to_dict() for r in stats.last30]
        record.user_data = stats.user_data.to_dict() if stats.user_data else None
        self.db.commit()
        return self._to_stats(record)

    # Leaderboard

    def _to_leaderboard(self, record: LeaderboardRecord) -> Leaderboard:
        return Leaderboard(
            date=record.date,
            entries=[LeaderboardEntry.from_dict(e) for e in (record.entries or [])],
            last_updated_at=_as_utc(record.last_updated_at),
        )

    def load_leaderboard(self) -> Optional[Leaderboard]:
        """Get the stored leaderboard."""
        record = self.db.get(LeaderboardRecord, LeaderboardRecord.SINGLETON_ID)
        return self._to_leaderboard(record) if record else None

    def save_leaderboard(self, leaderboard: Leaderboard) -> Leaderboard:
        """Replace the stored leaderboard.

        Raises StaleDataError when the row changed since this session read it.
        """
        record = self.db.get(LeaderboardRecord, LeaderboardRecord.SINGLETON_ID)
        if record is None:
            record = LeaderboardRecord(id=LeaderboardRecord.SINGLETON_ID)
            self.db.add(record)

        record.date = leaderboard.date
        record.entries = [e.to_dict() for e in leaderboard.entries]
        record.last_updated_at = leaderboard.last_updated_at
        self.db.commit()
        return self._to_leaderboard(record)
