"""Word calendar: the secret word for each calendar day."""
import logging
from dataclasses import dataclass
from functools import lru_cache
from datetime import date
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

from dailyword.config import GameSettings, settings

logger = logging.getLogger(__name__)


def load_word_list(path: Path, word_length: int) -> Tuple[str, ...]:
    """Load a word list file, one word per line.

    Blank lines and lines starting with '#' are skipped. Words are
    lower-cased and kept in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the list is empty or contains a malformed word.
    """
    words = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            word = line.strip().lower()
            if not word or word.startswith("#"):
                continue
            if len(word) != word_length or not word.isascii() or not word.isalpha():
                raise ValueError(f"Invalid word '{word}' at {path}:{line_number}")
            words.append(word)

    if not words:
        raise ValueError(f"Word list {path} is empty")

    return tuple(words)


def build_dictionary(*word_lists: Iterable[str]) -> FrozenSet[str]:
    """Combine word lists into the set of accepted guesses."""
    return frozenset(word for words in word_lists for word in words)


@dataclass(frozen=True)
class WordCalendar:
    """Maps a calendar date to the secret word of that day.

    Day 0 is the epoch; the list repeats once exhausted and dates before
    the epoch wrap around from the end of the list.
    """
    epoch: date
    words: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.words:
            raise ValueError("Word calendar needs at least one word")

    def day_index(self, day: date) -> int:
        return (day - self.epoch).days % len(self.words)

    def word_for_date(self, day: date) -> str:
        """Get the secret word for a date."""
        return self.words[self.day_index(day)]

    @classmethod
    def from_settings(cls, game_settings: Optional[GameSettings] = None) -> "WordCalendar":
        """Build the calendar from the configured answers file."""
        game_settings = game_settings or settings.game
        words = load_word_list(game_settings.answers_file, game_settings.word_length)
        logger.info(f"Loaded {len(words)} answers from {game_settings.answers_file}")
        return cls(epoch=game_settings.epoch, words=words)


def load_dictionary(game_settings: Optional[GameSettings] = None) -> FrozenSet[str]:
    """Load the set of accepted guesses: allowed words plus all answers."""
    game_settings = game_settings or settings.game
    answers = load_word_list(game_settings.answers_file, game_settings.word_length)
    allowed = load_word_list(game_settings.words_file, game_settings.word_length)
    return build_dictionary(answers, allowed)


@lru_cache(maxsize=1)
def get_default_calendar() -> WordCalendar:
    """Calendar from the configured answers file, loaded once per process."""
    return WordCalendar.from_settings()


@lru_cache(maxsize=1)
def get_default_dictionary() -> FrozenSet[str]:
    """Accepted guesses from the configured word files, loaded once per process."""
    return load_dictionary()
