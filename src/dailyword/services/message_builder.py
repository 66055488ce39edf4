"""Chat messages for boards, statistics and the leaderboard."""
from datetime import datetime, timedelta
from typing import Optional

from dailyword.config import MAX_GUESSES, WORD_LENGTH
from dailyword.models.game_models import (
    GameStatus,
    GuessedGame,
    GuessValidationStatus,
    LeaderboardEntry,
    LetterStatus,
    PersonalLeaderboard,
    PublicGuessedGame,
    UserStats,
)
from dailyword.services.game_aggregator import SQUARES, build_result_text, build_shareable_result

KEYBOARD_ROWS = ("qwertyuiop", "asdfghjkl", "zxcvbnm")
EMPTY_SQUARE = "⬛"

MSG_ENTER_WORD = "Enter a {word_length}-letter word!"
MSG_UNKNOWN_WORD = "Word not found in dictionary!"
MSG_ALREADY_GUESSED = "Already guessed!"
MSG_NOT_VALID = "Not a valid guess!"


def validation_message(status: GuessValidationStatus, word_length: int = WORD_LENGTH) -> str:
    """User-facing text for a rejected guess."""
    if status in (
        GuessValidationStatus.INVALID_EMPTY,
        GuessValidationStatus.INVALID_SIZE,
        GuessValidationStatus.INVALID_FORMAT,
    ):
        return MSG_ENTER_WORD.format(word_length=word_length)
    if status is GuessValidationStatus.INVALID_WORD:
        return MSG_UNKNOWN_WORD
    if status is GuessValidationStatus.INVALID_ALREADY_GUESSED:
        return MSG_ALREADY_GUESSED
    return MSG_NOT_VALID


def hours_until_next_game(now: datetime) -> int:
    """Whole hours left until the next UTC day starts, rounded up."""
    next_day = datetime.combine(now.date() + timedelta(days=1), datetime.min.time(), tzinfo=now.tzinfo)
    seconds = (next_day - now).total_seconds()
    return max(1, int(-(-seconds // 3600)))


def render_keyboard(game: GuessedGame) -> str:
    """Keyboard rows with the best known status of each letter."""
    lines = []
    for row in KEYBOARD_ROWS:
        cells = []
        for letter in row:
            guessed = game.all_guessed_characters.get(letter)
            if guessed is None:
                cells.append(letter.upper())
            elif guessed.status is LetterStatus.INCORRECT:
                cells.append("·")
            else:
                cells.append(f"{letter.upper()}{SQUARES[guessed.status]}")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def render_board(game: GuessedGame, max_guesses: int = MAX_GUESSES, word_length: int = WORD_LENGTH) -> str:
    """Guesses with their feedback, followed by the empty rows left."""
    lines = []
    for guess in game.guesses:
        squares = "".join(SQUARES[c.status] for c in guess.characters)
        letters = " ".join(c.character.upper() for c in guess.characters)
        lines.append(f"{squares}  {letters}")
    lines.extend(EMPTY_SQUARE * word_length for _ in range(max_guesses - len(game.guesses)))
    return "\n".join(lines)


def render_game(
    game: GuessedGame,
    now: datetime,
    max_guesses: int = MAX_GUESSES,
    word_length: int = WORD_LENGTH,
) -> str:
    """Full message for the current state of a game."""
    header = f"🗓 Game of {game.date.isoformat()}"
    board = render_board(game, max_guesses, word_length)
    if game.status is GameStatus.IN_PROGRESS:
        remaining = max_guesses - game.guess_count
        return (
            f"{header}\n\n{board}\n\n{render_keyboard(game)}\n\n"
            f"Guesses left: {remaining}. Send me a {word_length}-letter word!"
        )
    if game.status is GameStatus.WON:
        outcome = f"🎉 You got it in {game.guess_count}/{max_guesses}!"
    else:
        outcome = f"😞 Out of guesses. The word was {game.word.upper()}."
    return (
        f"{header}\n\n{board}\n\n{outcome}\n"
        f"Play again in {hours_until_next_game(now)} hours."
    )


def render_stats(stats: Optional[UserStats], max_guesses: int = MAX_GUESSES) -> str:
    """Statistics summary with the win distribution."""
    if stats is None or stats.total_games == 0:
        return "📊 No finished games yet. Play today's word to start your stats!"

    most_wins = max(stats.win_guess_counts.values(), default=0)
    distribution = []
    for guess_count in range(1, max_guesses + 1):
        wins = stats.win_guess_counts.get(guess_count, 0)
        bar_length = round(wins / most_wins * 10) if most_wins else 0
        distribution.append(f"{guess_count}: {'🟩' * bar_length} {wins}")

    return (
        "📊 Your Statistics:\n\n"
        f"Played: {stats.total_games}\n"
        f"Won: {stats.total_wins} ({stats.win_percentage:.0f}%)\n"
        f"Lost: {stats.total_losses}\n"
        f"Current streak: {stats.current_streak}\n"
        f"Max streak: {stats.max_streak}\n\n"
        "Guess distribution:\n" + "\n".join(distribution)
    )


def _entry_name(entry: LeaderboardEntry) -> str:
    if entry.user_data is not None and entry.user_data.name:
        return entry.user_data.name
    return f"Player {entry.player_id}"


def _entry_line(position: str, entry: LeaderboardEntry) -> str:
    return (
        f"{position} {_entry_name(entry)} {entry.score:g} "
        f"({entry.total_games_won} won, {entry.total_games_won_guesses} guesses)"
    )


def render_leaderboard(leaderboard: PersonalLeaderboard) -> str:
    """Ranked entries and, when known, the viewer's own position."""
    lines = [f"🏆 Leaderboard as of {leaderboard.date.isoformat()}", ""]
    if not leaderboard.entries:
        lines.append("No scores yet.")
    for index, entry in enumerate(leaderboard.entries):
        marker = "👉" if index == leaderboard.personal_entry_index else f"{index + 1}."
        lines.append(_entry_line(marker, entry))

    if leaderboard.personal_entry is not None and leaderboard.personal_rank is None:
        lines.extend(["", _entry_line("You:", leaderboard.personal_entry) + " - not ranked"])
    return "\n".join(lines)


def render_share(game: Optional[PublicGuessedGame], app_name: str, max_guesses: int = MAX_GUESSES) -> str:
    """Shareable result: title line and the coloured grid."""
    result = build_shareable_result(game, app_name, max_guesses)
    return f"{result.title}\n\n{result.text}"


def render_public_game(game: PublicGuessedGame, max_guesses: int = MAX_GUESSES) -> str:
    """A game viewed by someone else: colours only."""
    if game.status is GameStatus.WON:
        outcome = f"Solved in {len(game.guesses)}/{max_guesses}"
    elif game.status is GameStatus.LOST:
        outcome = f"Not solved X/{max_guesses}"
    else:
        outcome = f"In progress ({len(game.guesses)}/{max_guesses})"
    text = build_result_text(game)
    if game.word:
        outcome += f", the word was {game.word.upper()}"
    return f"🗓 Game of {game.date.isoformat()}: {outcome}\n\n{text}"
