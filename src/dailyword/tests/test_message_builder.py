"""Tests for chat message rendering."""
from datetime import UTC, date, datetime

import pytest

from dailyword.models.game_models import (
    Game,
    GameResult,
    GuessValidationStatus,
    LeaderboardEntry,
    PersonalLeaderboard,
    UserData,
    UserStats,
)
from dailyword.services.game_aggregator import to_guessed_game, to_public_game
from dailyword.services.message_builder import (
    MSG_ALREADY_GUESSED,
    MSG_UNKNOWN_WORD,
    hours_until_next_game,
    render_board,
    render_game,
    render_keyboard,
    render_leaderboard,
    render_public_game,
    render_share,
    render_stats,
    validation_message,
)
from dailyword.services.word_calendar import WordCalendar
from dailyword.tests.conftest import EPOCH

NOW = datetime(2024, 2, 3, 20, 15, tzinfo=UTC)


def guessed(calendar: WordCalendar, guesses):
    return to_guessed_game(Game(id="g1", player_id=1, date=EPOCH, guesses=list(guesses)), calendar)


@pytest.mark.parametrize(
    "status,message",
    [
        (GuessValidationStatus.INVALID_EMPTY, "Enter a 5-letter word!"),
        (GuessValidationStatus.INVALID_SIZE, "Enter a 5-letter word!"),
        (GuessValidationStatus.INVALID_FORMAT, "Enter a 5-letter word!"),
        (GuessValidationStatus.INVALID_WORD, MSG_UNKNOWN_WORD),
        (GuessValidationStatus.INVALID_ALREADY_GUESSED, MSG_ALREADY_GUESSED),
    ],
)
def test_validation_message(status: GuessValidationStatus, message: str) -> None:
    """Test the text shown for each rejected guess."""
    assert validation_message(status) == message


def test_validation_message_uses_word_length() -> None:
    """Test that the size hint follows the configured word length."""
    assert validation_message(GuessValidationStatus.INVALID_SIZE, 6) == "Enter a 6-letter word!"


def test_hours_until_next_game() -> None:
    """Test that the hours left are rounded up."""
    assert hours_until_next_game(NOW) == 4
    assert hours_until_next_game(datetime(2024, 2, 3, 0, 0, tzinfo=UTC)) == 24
    assert hours_until_next_game(datetime(2024, 2, 3, 23, 59, tzinfo=UTC)) == 1


def test_render_board(calendar: WordCalendar) -> None:
    """Test one row per guess plus empty rows."""
    board = render_board(guessed(calendar, ["paper"]), 6).splitlines()

    assert board[0] == "🟨🟨🟩🟨⬜  P A P E R"
    assert board[1:] == ["⬛⬛⬛⬛⬛"] * 5


def test_render_game_uses_word_length(calendar: WordCalendar) -> None:
    """Test that empty rows and the prompt follow the configured word length."""
    message = render_game(guessed(calendar, ["paper"]), NOW, 3, word_length=6)

    assert message.count("⬛⬛⬛⬛⬛⬛\n") == 2
    assert "Send me a 6-letter word!" in message


def test_render_keyboard(calendar: WordCalendar) -> None:
    """Test that guessed letters carry their best status."""
    keyboard = render_keyboard(guessed(calendar, ["paper"]))

    assert "P🟩" in keyboard
    assert "A🟨" in keyboard
    assert "R" not in keyboard.splitlines()[0].split()
    assert "·" in keyboard
    assert "Q" in keyboard


def test_render_game_in_progress(calendar: WordCalendar) -> None:
    """Test the message of a game still being played."""
    message = render_game(guessed(calendar, ["paper"]), NOW, 6)

    assert "2024-02-03" in message
    assert "Guesses left: 5" in message


def test_render_game_won(calendar: WordCalendar) -> None:
    """Test the message of a won game."""
    message = render_game(guessed(calendar, ["paper", "apple"]), NOW, 6)

    assert "You got it in 2/6" in message
    assert "Play again in 4 hours" in message


def test_render_game_lost(calendar: WordCalendar) -> None:
    """Test that a lost game reveals the word."""
    message = render_game(
        guessed(calendar, ["crane", "sound", "house", "eerie", "paper", "pleat"]), NOW, 6
    )

    assert "The word was APPLE" in message


def test_render_stats_empty() -> None:
    """Test the statistics of a player who never finished a game."""
    assert "No finished games yet" in render_stats(None)
    assert "No finished games yet" in render_stats(UserStats(player_id=1))


def test_render_stats() -> None:
    """Test the statistics summary."""
    stats = UserStats(
        player_id=1,
        total_games=4,
        total_wins=3,
        total_losses=1,
        current_streak=2,
        max_streak=2,
        win_guess_counts={2: 1, 4: 2},
    )

    message = render_stats(stats, 6)

    assert "Played: 4" in message
    assert "Won: 3 (75%)" in message
    assert "Current streak: 2" in message
    assert "4: 🟩🟩🟩🟩🟩🟩🟩🟩🟩🟩 2" in message
    assert "1:  0" in message


def make_entry(player_id: int, score: float, name=None) -> LeaderboardEntry:
    return LeaderboardEntry(
        player_id=player_id,
        total_games_won=1,
        total_games_won_guesses=3,
        last_date=EPOCH,
        last14=[GameResult(date=EPOCH, won=True, guess_count=3)],
        score=score,
        user_data=UserData(username=name) if name else None,
    )


def test_render_leaderboard_marks_viewer() -> None:
    """Test that the viewer's own row is marked."""
    entries = [make_entry(1, 10.0, "alice"), make_entry(2, 7.5)]
    leaderboard = PersonalLeaderboard(
        date=EPOCH,
        entries=entries,
        last_updated_at=NOW,
        personal_entry=entries[1],
        personal_entry_index=1,
    )

    lines = render_leaderboard(leaderboard).splitlines()

    assert lines[2].startswith("1. alice 10")
    assert lines[3].startswith("👉 Player 2 7.5")


def test_render_leaderboard_unranked_viewer() -> None:
    """Test that an unranked viewer sees their own score below."""
    leaderboard = PersonalLeaderboard(
        date=EPOCH,
        entries=[],
        last_updated_at=NOW,
        personal_entry=make_entry(3, 1.0, "carol"),
    )

    message = render_leaderboard(leaderboard)

    assert "No scores yet." in message
    assert "You: carol 1" in message
    assert "not ranked" in message


def test_render_share(calendar: WordCalendar) -> None:
    """Test the shareable text of a won game."""
    game = to_public_game(guessed(calendar, ["paper", "apple"]), is_owner=False)

    assert render_share(game, "Dailyword", 6) == "Dailyword 2024-02-03 2/6\n\n🟨🟨🟩🟨⬜\n🟩🟩🟩🟩🟩"
    assert render_share(None, "Dailyword") == "Dailyword\n\nPlay Dailyword!"


def test_render_public_game(calendar: WordCalendar) -> None:
    """Test a game seen by another player or by its owner."""
    game = guessed(calendar, ["paper", "apple"])

    public = render_public_game(to_public_game(game, is_owner=False), 6)
    owner = render_public_game(to_public_game(game, is_owner=True), 6)

    assert "Solved in 2/6" in public
    assert "APPLE" not in public
    assert "the word was APPLE" in owner
