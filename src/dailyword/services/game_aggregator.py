"""Replays stored games into their visible state."""
from dataclasses import dataclass
from typing import Dict, List, Optional

from dailyword.config import MAX_GUESSES
from dailyword.models.game_models import (
    Game,
    GameStatus,
    Guess,
    GuessCharacter,
    GuessedGame,
    LetterStatus,
    PublicGuessedGame,
)
from dailyword.services.guess_evaluator import evaluate
from dailyword.services.word_calendar import WordCalendar

SQUARES = {
    LetterStatus.CORRECT: "🟩",
    LetterStatus.WRONG_POSITION: "🟨",
    LetterStatus.INCORRECT: "⬜",
}


def derive_status(guesses: List[Guess], max_guesses: int = MAX_GUESSES) -> GameStatus:
    """WON if the last guess is all correct, LOST once out of guesses."""
    if guesses and guesses[-1].is_correct:
        return GameStatus.WON
    if len(guesses) >= max_guesses:
        return GameStatus.LOST
    return GameStatus.IN_PROGRESS


def to_guessed_game(
    game: Game,
    calendar: WordCalendar,
    max_guesses: int = MAX_GUESSES,
) -> GuessedGame:
    """Evaluate every guess of a game against the word of its day."""
    word = calendar.word_for_date(game.date)

    # Best status seen per letter, for the keyboard hints.
    # A letter is only overwritten when unset, INCORRECT, or by a CORRECT.
    all_guessed_characters: Dict[str, GuessCharacter] = {}
    guesses: List[Guess] = []
    for raw_guess in game.guesses:
        guess = evaluate(word, raw_guess)
        for gc in guess.characters:
            previous = all_guessed_characters.get(gc.character)
            if (
                previous is None
                or previous.status is LetterStatus.INCORRECT
                or gc.status is LetterStatus.CORRECT
            ):
                all_guessed_characters[gc.character] = gc
        guesses.append(guess)

    return GuessedGame(
        id=game.id,
        player_id=game.player_id,
        date=game.date,
        word=word,
        original_guesses=tuple(game.guesses),
        guesses=tuple(guesses),
        all_guessed_characters=all_guessed_characters,
        status=derive_status(guesses, max_guesses),
        user_data=game.user_data,
    )


def to_public_game(game: GuessedGame, is_owner: bool) -> PublicGuessedGame:
    """Project a game for sharing.

    Non-owners see only the colours of each letter. The owner sees the
    letters, and the word once the game is over.
    """
    if is_owner:
        guesses = game.guesses
    else:
        guesses = tuple(
            Guess(characters=tuple(GuessCharacter(character="", status=c.status) for c in g.characters))
            for g in game.guesses
        )
    return PublicGuessedGame(
        id=game.id,
        date=game.date,
        guesses=guesses,
        status=game.status,
        word=game.word if is_owner and game.is_finished else None,
    )


@dataclass(frozen=True)
class ShareableResult:
    title: str
    text: str


def build_result_text(game: PublicGuessedGame) -> str:
    """Grid of coloured squares, one row per guess."""
    return "\n".join(
        "".join(SQUARES[c.status] for c in guess.characters) for guess in game.guesses
    )


def build_shareable_result(
    game: Optional[PublicGuessedGame],
    app_name: str,
    max_guesses: int = MAX_GUESSES,
) -> ShareableResult:
    if game is None:
        return ShareableResult(title=app_name, text=f"Play {app_name}!")
    guess_count = str(len(game.guesses)) if game.status is GameStatus.WON else "X"
    title = f"{app_name} {game.date.isoformat()} {guess_count}/{max_guesses}"
    return ShareableResult(title=title, text=build_result_text(game))
