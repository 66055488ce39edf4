"""Tests for guess evaluation."""
from typing import List

import pytest

from dailyword.models.game_models import LetterStatus
from dailyword.services.guess_evaluator import evaluate

C = LetterStatus.CORRECT
W = LetterStatus.WRONG_POSITION
I = LetterStatus.INCORRECT


def statuses(secret: str, guess: str) -> List[LetterStatus]:
    return [c.status for c in evaluate(secret, guess).characters]


@pytest.mark.parametrize(
    "secret,guess,expected",
    [
        ("apple", "apple", [C, C, C, C, C]),
        ("apple", "paper", [W, W, C, W, I]),
        ("crane", "sound", [I, I, I, C, I]),
        ("house", "mound", [I, C, C, I, I]),
        ("stone", "tests", [W, W, W, I, I]),
        ("eerie", "melee", [I, C, I, W, C]),
        ("sassy", "tests", [I, I, C, I, W]),
    ],
)
def test_evaluate(secret: str, guess: str, expected: List[LetterStatus]) -> None:
    """Test letter statuses for a range of guesses."""
    assert statuses(secret, guess) == expected


def test_exact_match_takes_priority_over_earlier_copy() -> None:
    """Test that a later exact match uses up the only copy of a letter."""
    # one 'e' in the secret, matched at the end
    assert statuses("crane", "eerie") == [I, I, W, I, C]


def test_characters_keep_guess_letters() -> None:
    """Test that the evaluated guess carries the guessed letters in order."""
    guess = evaluate("apple", "Paper")

    assert guess.word == "paper"
    assert [c.character for c in guess.characters] == list("paper")
    assert not guess.is_correct


def test_evaluation_is_pure() -> None:
    """Test that evaluating twice gives the same result."""
    assert evaluate("crane", "sound") == evaluate("crane", "sound")


def test_all_correct_is_correct() -> None:
    """Test that a winning guess is marked correct."""
    assert evaluate("apple", "APPLE").is_correct
