"""Player statistics folded from finished games."""
import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from dailyword.models.game_models import GameResult, GameStatus, GuessedGame, UserStats

logger = logging.getLogger(__name__)

HISTORY_SIZE = 30


def empty_stats(player_id: int) -> UserStats:
    """All-zero statistics for a player."""
    return UserStats(player_id=player_id)


def is_previous_day(current: date, previous: Optional[date]) -> bool:
    """Whether previous is exactly the calendar day before current."""
    return previous is not None and previous + timedelta(days=1) == current


def update_stats(stats: UserStats, game: GuessedGame, history_size: int = HISTORY_SIZE) -> UserStats:
    """Fold a finished game into a player's statistics.

    Returns a new UserStats; the given one is left untouched.

    Raises:
        ValueError: If the game is still in progress.
    """
    if not game.is_finished:
        raise ValueError(f"Game {game.id} is not finished")

    new_stats = UserStats(
        player_id=stats.player_id,
        total_games=stats.total_games + 1,
        total_wins=stats.total_wins,
        total_losses=stats.total_losses,
        current_streak=stats.current_streak,
        max_streak=stats.max_streak,
        last_game_won_date=stats.last_game_won_date,
        win_guess_counts=dict(stats.win_guess_counts),
        last30=list(stats.last30),
        user_data=game.user_data or stats.user_data,
    )

    guess_count = game.guess_count
    if game.status is GameStatus.WON:
        new_stats.total_wins += 1
        new_stats.win_guess_counts[guess_count] = new_stats.win_guess_counts.get(guess_count, 0) + 1
        if is_previous_day(game.date, stats.last_game_won_date):
            new_stats.current_streak += 1
        else:
            new_stats.current_streak = 1
        new_stats.last_game_won_date = game.date
        new_stats.max_streak = max(new_stats.max_streak, new_stats.current_streak)
    else:
        new_stats.total_losses += 1
        new_stats.current_streak = 0

    new_stats.last30.append(
        GameResult(date=game.date, won=game.status is GameStatus.WON, guess_count=guess_count)
    )
    if len(new_stats.last30) > history_size:
        del new_stats.last30[: len(new_stats.last30) - history_size]

    return new_stats


def rebuild_stats(
    player_id: int,
    games: Iterable[GuessedGame],
    before: Optional[date] = None,
    history_size: int = HISTORY_SIZE,
) -> UserStats:
    """Replay a player's finished games, oldest first, from empty statistics.

    Only games dated strictly before ``before`` are replayed when it is given.
    """
    finished = sorted(
        (
            g for g in games
            if g.is_finished and (before is None or g.date < before)
        ),
        key=lambda g: g.date,
    )
    stats = empty_stats(player_id)
    for game in finished:
        stats = update_stats(stats, game, history_size)

    logger.info(f"Rebuilt stats for player {player_id} from {len(finished)} finished games")
    return stats
