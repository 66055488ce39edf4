"""Letter-by-letter evaluation of a guess against the secret word."""
from collections import Counter
from typing import List, Optional

from dailyword.models.game_models import Guess, GuessCharacter, LetterStatus


def evaluate(secret_word: str, guess_word: str) -> Guess:
    """Evaluate a guess against the secret word.

    Exact matches are marked first and use up one copy of their letter.
    The remaining positions are then scanned left to right: a letter that
    still has unused copies in the secret word is WRONG_POSITION, any
    further copy is INCORRECT.
    """
    secret = secret_word.lower()
    guess = guess_word.lower()

    letter_budget = Counter(secret)
    used: Counter = Counter()
    statuses: List[Optional[LetterStatus]] = [None] * len(guess)

    # exact matches first
    for i, c in enumerate(guess):
        if i < len(secret) and secret[i] == c:
            statuses[i] = LetterStatus.CORRECT
            used[c] += 1

    for i, c in enumerate(guess):
        if statuses[i] is not None:
            continue
        if c in letter_budget:
            used[c] += 1
            statuses[i] = (
                LetterStatus.WRONG_POSITION if used[c] <= letter_budget[c] else LetterStatus.INCORRECT
            )
        else:
            statuses[i] = LetterStatus.INCORRECT

    return Guess(
        characters=tuple(GuessCharacter(character=c, status=s) for c, s in zip(guess, statuses))
    )
