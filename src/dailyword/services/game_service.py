"""Game service: daily games, guesses, statistics and the leaderboard."""
import logging
import re
from datetime import UTC, date, datetime
from typing import Callable, FrozenSet, Iterable, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from dailyword import monitoring
from dailyword.config import GameSettings, settings
from dailyword.models.game_models import (
    Game,
    GameStatus,
    GuessedGame,
    GuessValidationStatus,
    Leaderboard,
    PersonalLeaderboard,
    PublicGuessedGame,
    UserData,
    UserStats,
)
from dailyword.services.game_aggregator import to_guessed_game, to_public_game
from dailyword.services.game_repository import GameRepository
from dailyword.services.leaderboard_service import LeaderboardService
from dailyword.services.stats_service import rebuild_stats, update_stats
from dailyword.services.word_calendar import (
    WordCalendar,
    get_default_calendar,
    get_default_dictionary,
    load_dictionary,
)

logger = logging.getLogger(__name__)


class GameError(Exception):
    """Base class for errors that abort a game operation."""


class GameNotFoundError(GameError):
    """The game to guess against does not exist."""


class GameFinishedError(GameError):
    """The game is already won or lost."""


class InvalidGuessError(GameError):
    """The guess did not pass validation."""

    def __init__(self, status: GuessValidationStatus, guess: Optional[str] = None):
        self.status = status
        self.guess = guess
        super().__init__(f"Invalid guess {guess!r}: {status.value}")


def normalize_guess(raw: str) -> str:
    return raw.strip().lower()


class GameService:
    """Service for playing the daily game.

    Guessed games are never stored: they are rebuilt from the raw guess
    list and the word calendar on every read.

    The stats and leaderboard updates after a finished game are separate
    read-modify-write steps without a shared transaction. Both rows are
    version checked and each step is retried on conflict; two concurrent
    guesses by the same player on the same game are not guarded.
    """

    def __init__(
        self,
        db: Session,
        calendar: Optional[WordCalendar] = None,
        dictionary: Optional[Iterable[str]] = None,
        game_settings: Optional[GameSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service with a database session."""
        self.db = db
        self.game_settings = game_settings or settings.game
        if calendar is None:
            calendar = (
                get_default_calendar() if game_settings is None
                else WordCalendar.from_settings(game_settings)
            )
        if dictionary is None:
            dictionary = get_default_dictionary() if game_settings is None else load_dictionary(game_settings)
        self.calendar = calendar
        self.dictionary: FrozenSet[str] = frozenset(dictionary)
        self.clock = clock or (lambda: datetime.now(UTC))
        self.repository = GameRepository(db)
        self.leaderboard_service = LeaderboardService.from_settings(
            self.game_settings,
            user_data_lookup=self._user_data_for_game,
        )
        self.guess_pattern = re.compile(rf"^[A-Za-z]{{{self.game_settings.word_length}}}$")

    def today(self) -> date:
        """Current game day (UTC)."""
        return self.clock().date()

    def _to_guessed_game(self, game: Game) -> GuessedGame:
        return to_guessed_game(game, self.calendar, self.game_settings.max_guesses)

    def _user_data_for_game(self, player_id: int, day: date) -> Optional[UserData]:
        game = self.repository.load_by_player_and_date(player_id, day)
        return game.user_data if game else None

    # Games

    def load_or_create(self, player_id: int, user_data: Optional[UserData] = None) -> GuessedGame:
        """Get today's game for a player, creating it on first play."""
        today = self.today()
        game = self.repository.load_by_player_and_date(player_id, today)
        if game is None:
            game = Game(player_id=player_id, date=today, guesses=[], user_data=user_data)
            game.id = self.repository.save(game)
            monitoring.games_started.inc()
            logger.info(f"Created game {game.id} for player {player_id} on {today}")
        return self._to_guessed_game(game)

    def load(self, game_id: str) -> Optional[GuessedGame]:
        """Get a game by id."""
        game = self.repository.load_by_id(game_id)
        return self._to_guessed_game(game) if game else None

    def load_all_by_player(self, player_id: int) -> List[GuessedGame]:
        """Get all games of a player, oldest first."""
        return [self._to_guessed_game(g) for g in self.repository.load_all_by_player(player_id)]

    def load_public(self, game_id: str, is_owner: bool) -> Optional[PublicGuessedGame]:
        """Get the shareable view of a game."""
        game = self.load(game_id)
        return to_public_game(game, is_owner) if game else None

    # Guesses

    def validate_guess(
        self,
        raw: Optional[str],
        previous_guesses: Optional[Iterable[str]] = None,
    ) -> GuessValidationStatus:
        """Classify a raw guess. Never raises."""
        if not raw:
            return GuessValidationStatus.INVALID_EMPTY
        guess = normalize_guess(raw)
        if not guess:
            return GuessValidationStatus.INVALID_EMPTY
        if len(guess) != self.game_settings.word_length:
            return GuessValidationStatus.INVALID_SIZE
        if not self.guess_pattern.match(guess):
            return GuessValidationStatus.INVALID_FORMAT
        if guess not in self.dictionary:
            return GuessValidationStatus.INVALID_WORD
        if previous_guesses is not None and guess in previous_guesses:
            return GuessValidationStatus.INVALID_ALREADY_GUESSED
        return GuessValidationStatus.VALID

    def is_valid_guess(self, raw: Optional[str]) -> bool:
        return self.validate_guess(raw) is GuessValidationStatus.VALID

    def guess(self, guessed_game: GuessedGame, raw: str) -> GuessedGame:
        """Submit a guess and return the updated game.

        Raises:
            InvalidGuessError: If the word is not valid or was already guessed.
            GameNotFoundError: If the game is not stored.
            GameFinishedError: If the game is already won or lost.
        """
        status = self.validate_guess(raw)
        if status is not GuessValidationStatus.VALID:
            monitoring.invalid_guesses.labels(status=status.value).inc()
            raise InvalidGuessError(status, raw)

        game = self.repository.load_by_player_and_date(guessed_game.player_id, guessed_game.date)
        if game is None:
            raise GameNotFoundError(f"Game not found: {guessed_game.id}")

        if self._to_guessed_game(game).is_finished:
            raise GameFinishedError(f"Game {game.id} is already finished")

        formatted_guess = normalize_guess(raw)
        if formatted_guess in game.guesses:
            status = GuessValidationStatus.INVALID_ALREADY_GUESSED
            monitoring.invalid_guesses.labels(status=status.value).inc()
            raise InvalidGuessError(status, raw)

        game.guesses.append(formatted_guess)
        try:
            game.id = self.repository.save(game)
        except Exception:
            self.db.rollback()
            raise
        monitoring.guesses_submitted.inc()
        logger.info(f"Player {game.player_id} guessed '{formatted_guess}' in game {game.id}")

        result = self._to_guessed_game(game)
        if result.is_finished:
            self._on_game_finished(result)
        return result

    def _on_game_finished(self, game: GuessedGame) -> None:
        """Fold the finished game into the player's stats and the leaderboard."""
        logger.info(f"Game {game.id} of player {game.player_id} finished: {game.status.value}")
        monitoring.games_finished.labels(status=game.status.value).inc()
        if game.status is GameStatus.WON:
            monitoring.winning_guess_count.observe(game.guess_count)

        saved_stats = self._fold_stats(game)
        if saved_stats is not None:
            self._refresh_leaderboard(saved_stats)

    def _fold_stats(self, game: GuessedGame) -> Optional[UserStats]:
        """Fold the game into the stored stats, retrying on conflict."""
        retries = self.game_settings.leaderboard_retries
        for attempt in range(1, retries + 1):
            try:
                stats = self._load_or_rebuild_stats(game)
                if any(result.date == game.date for result in stats.last30):
                    logger.info(f"Game {game.id} already counted in stats of player {game.player_id}")
                    return stats
                return self.repository.save_stats(
                    update_stats(stats, game, self.game_settings.history_size)
                )
            except StaleDataError:
                self.db.rollback()
                monitoring.stats_conflicts.inc()
                logger.warning(
                    f"Stats of player {game.player_id} changed while folding game {game.id} "
                    f"(attempt {attempt}/{retries})"
                )
            except Exception:
                self.db.rollback()
                raise
        logger.warning(f"Gave up folding game {game.id} into stats after {retries} attempts")
        return None

    def _load_or_rebuild_stats(self, game: GuessedGame) -> UserStats:
        stats = self.repository.load_stats(game.player_id)
        if stats is not None:
            return stats
        monitoring.stats_rebuilds.inc()
        return rebuild_stats(
            game.player_id,
            self.load_all_by_player(game.player_id),
            before=game.date,
            history_size=self.game_settings.history_size,
        )

    # Statistics

    def load_stats(self, player_id: int) -> Optional[UserStats]:
        """Get a player's statistics."""
        return self.repository.load_stats(player_id)

    # Leaderboard

    def _rebuild_leaderboard(self) -> Leaderboard:
        leaderboard = self.leaderboard_service.build_leaderboard(
            self.repository.load_all_stats(),
            now=self.clock(),
            floor_date=self.game_settings.epoch,
        )
        monitoring.leaderboard_updates.labels(kind="rebuild").inc()
        return self.repository.save_leaderboard(leaderboard)

    def _refresh_leaderboard(self, stats: UserStats) -> None:
        """Re-score the player on the stored leaderboard, retrying on conflict."""
        retries = self.game_settings.leaderboard_retries
        for attempt in range(1, retries + 1):
            try:
                leaderboard = self.repository.load_leaderboard()
                if leaderboard is None:
                    self._rebuild_leaderboard()
                    return
                updated = self.leaderboard_service.update_leaderboard(stats, leaderboard, self.clock())
                if updated is leaderboard:
                    return
                self.repository.save_leaderboard(updated)
                monitoring.leaderboard_updates.labels(kind="update").inc()
                return
            except StaleDataError:
                self.db.rollback()
                monitoring.leaderboard_conflicts.inc()
                logger.warning(
                    f"Leaderboard changed while updating player {stats.player_id} "
                    f"(attempt {attempt}/{retries})"
                )
        logger.warning(f"Gave up updating leaderboard for player {stats.player_id} after {retries} attempts")

    def load_leaderboard(self, player_id: Optional[int] = None) -> PersonalLeaderboard:
        """Get the leaderboard, with the player's own entry when given."""
        leaderboard = self.repository.load_leaderboard()
        if leaderboard is None:
            leaderboard = self._rebuild_leaderboard()

        if player_id is None:
            return PersonalLeaderboard(
                date=leaderboard.date,
                entries=leaderboard.entries,
                last_updated_at=leaderboard.last_updated_at,
            )
        return self.leaderboard_service.with_personal_entry(
            leaderboard, player_id, self.repository.load_stats
        )
