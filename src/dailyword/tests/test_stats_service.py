"""Tests for player statistics."""
from datetime import date, timedelta

import pytest

from dailyword.models.game_models import Game, GameResult, UserData
from dailyword.services.game_aggregator import to_guessed_game
from dailyword.services.stats_service import (
    empty_stats,
    is_previous_day,
    rebuild_stats,
    update_stats,
)
from dailyword.services.word_calendar import WordCalendar

EPOCH = date(2024, 2, 3)
PLAYER_ID = 2002

# One word for every day keeps the guesses simple
calendar = WordCalendar(epoch=EPOCH, words=("apple",))


def won_game(day: date, guesses=("apple",), user_data=None):
    return to_guessed_game(
        Game(id=f"won-{day}", player_id=PLAYER_ID, date=day, guesses=list(guesses), user_data=user_data),
        calendar,
    )


def lost_game(day: date):
    return to_guessed_game(
        Game(
            id=f"lost-{day}",
            player_id=PLAYER_ID,
            date=day,
            guesses=["crane", "sound", "house", "eerie", "paper", "pleat"],
        ),
        calendar,
    )


def test_is_previous_day() -> None:
    """Test the consecutive day check."""
    assert is_previous_day(date(2024, 3, 1), date(2024, 2, 29))
    assert not is_previous_day(date(2024, 3, 1), date(2024, 2, 28))
    assert not is_previous_day(date(2024, 3, 1), date(2024, 3, 1))
    assert not is_previous_day(date(2024, 3, 1), None)


def test_first_win() -> None:
    """Test folding a first win into empty statistics."""
    stats = update_stats(empty_stats(PLAYER_ID), won_game(EPOCH, ("paper", "apple")))

    assert stats.total_games == 1
    assert stats.total_wins == 1
    assert stats.total_losses == 0
    assert stats.current_streak == 1
    assert stats.max_streak == 1
    assert stats.last_game_won_date == EPOCH
    assert stats.win_guess_counts == {2: 1}
    assert stats.last30 == [GameResult(date=EPOCH, won=True, guess_count=2)]


def test_update_does_not_mutate_input() -> None:
    """Test that the given statistics are left untouched."""
    before = empty_stats(PLAYER_ID)

    update_stats(before, won_game(EPOCH))

    assert before == empty_stats(PLAYER_ID)


def test_consecutive_wins_extend_streak() -> None:
    """Test that wins on consecutive days build a streak."""
    stats = empty_stats(PLAYER_ID)
    for offset in range(3):
        stats = update_stats(stats, won_game(EPOCH + timedelta(days=offset)))

    assert stats.current_streak == 3
    assert stats.max_streak == 3
    assert stats.win_guess_counts == {1: 3}


def test_gap_restarts_streak() -> None:
    """Test that a missed day restarts the streak at one."""
    stats = update_stats(empty_stats(PLAYER_ID), won_game(EPOCH))
    stats = update_stats(stats, won_game(EPOCH + timedelta(days=1)))
    stats = update_stats(stats, won_game(EPOCH + timedelta(days=3)))

    assert stats.current_streak == 1
    assert stats.max_streak == 2


def test_loss_resets_streak() -> None:
    """Test that a loss ends the current streak but keeps the max."""
    stats = update_stats(empty_stats(PLAYER_ID), won_game(EPOCH))
    stats = update_stats(stats, won_game(EPOCH + timedelta(days=1)))
    stats = update_stats(stats, lost_game(EPOCH + timedelta(days=2)))

    assert stats.current_streak == 0
    assert stats.max_streak == 2
    assert stats.total_losses == 1
    assert stats.total_games == stats.total_wins + stats.total_losses
    assert stats.last30[-1] == GameResult(date=EPOCH + timedelta(days=2), won=False, guess_count=6)


def test_win_after_loss_starts_new_streak() -> None:
    """Test that a win right after a loss does not continue the old streak."""
    stats = update_stats(empty_stats(PLAYER_ID), won_game(EPOCH))
    stats = update_stats(stats, lost_game(EPOCH + timedelta(days=1)))
    stats = update_stats(stats, won_game(EPOCH + timedelta(days=2)))

    assert stats.current_streak == 1
    assert stats.max_streak == 1


def test_history_keeps_latest_results() -> None:
    """Test that the history is capped and keeps the newest entries."""
    stats = empty_stats(PLAYER_ID)
    for offset in range(35):
        stats = update_stats(stats, won_game(EPOCH + timedelta(days=offset)))

    assert len(stats.last30) == 30
    assert stats.last30[0].date == EPOCH + timedelta(days=5)
    assert stats.last30[-1].date == EPOCH + timedelta(days=34)
    assert stats.last_result_date == EPOCH + timedelta(days=34)


def test_user_data_from_game_replaces_snapshot() -> None:
    """Test that the latest profile snapshot is kept."""
    stats = update_stats(empty_stats(PLAYER_ID), won_game(EPOCH, user_data=UserData(username="old")))
    stats = update_stats(stats, won_game(EPOCH + timedelta(days=1), user_data=UserData(username="new")))
    stats = update_stats(stats, won_game(EPOCH + timedelta(days=2)))

    assert stats.user_data == UserData(username="new")


def test_unfinished_game_rejected() -> None:
    """Test that an in-progress game cannot be folded in."""
    with pytest.raises(ValueError):
        update_stats(empty_stats(PLAYER_ID), won_game(EPOCH, guesses=("paper",)))


def test_rebuild_stats_replays_in_date_order() -> None:
    """Test rebuilding from games given out of order."""
    games = [
        won_game(EPOCH + timedelta(days=2)),
        won_game(EPOCH),
        won_game(EPOCH + timedelta(days=1), ("paper", "apple")),
    ]

    stats = rebuild_stats(PLAYER_ID, games)

    assert stats.total_games == 3
    assert stats.current_streak == 3
    assert stats.win_guess_counts == {1: 2, 2: 1}
    assert [r.date for r in stats.last30] == [EPOCH + timedelta(days=d) for d in range(3)]


def test_rebuild_stats_skips_unfinished_and_later_games() -> None:
    """Test that only finished games before the cut-off are replayed."""
    games = [
        won_game(EPOCH),
        won_game(EPOCH + timedelta(days=1), ("paper",)),
        lost_game(EPOCH + timedelta(days=2)),
        won_game(EPOCH + timedelta(days=3)),
    ]

    stats = rebuild_stats(PLAYER_ID, games, before=EPOCH + timedelta(days=3))

    assert stats.total_games == 2
    assert stats.total_wins == 1
    assert stats.total_losses == 1
    assert stats.current_streak == 0


def test_rebuild_stats_without_games() -> None:
    """Test that no games give empty statistics."""
    assert rebuild_stats(PLAYER_ID, []) == empty_stats(PLAYER_ID)
