"""Domain models for games, player statistics and the leaderboard."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class LetterStatus(Enum):
    """Feedback for one letter of a guess."""
    CORRECT = "CORRECT"  # Right letter, right position
    WRONG_POSITION = "WRONG_POSITION"  # Letter is in the word elsewhere
    INCORRECT = "INCORRECT"  # Letter is not in the word (or all copies are used up)


class GameStatus(Enum):
    """Status of a daily game."""
    IN_PROGRESS = "IN_PROGRESS"
    WON = "WON"
    LOST = "LOST"

    @property
    def is_finished(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


class GuessValidationStatus(Enum):
    """Result of validating a raw guess."""
    VALID = "VALID"
    INVALID_EMPTY = "INVALID_EMPTY"
    INVALID_SIZE = "INVALID_SIZE"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_WORD = "INVALID_WORD"
    INVALID_ALREADY_GUESSED = "INVALID_ALREADY_GUESSED"


@dataclass(frozen=True)
class GuessCharacter:
    """A letter of a guess with its feedback."""
    character: str
    status: LetterStatus


@dataclass(frozen=True)
class Guess:
    """An evaluated guess."""
    characters: Tuple[GuessCharacter, ...]

    @property
    def word(self) -> str:
        return "".join(c.character for c in self.characters)

    @property
    def is_correct(self) -> bool:
        return bool(self.characters) and all(
            c.status is LetterStatus.CORRECT for c in self.characters
        )


@dataclass
class UserData:
    """Profile snapshot of a player, taken from the chat client."""
    username: Optional[str] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "display_name": self.display_name,
            "profile_image": self.profile_image,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["UserData"]:
        if not data:
            return None
        return cls(
            username=data.get("username"),
            display_name=data.get("display_name"),
            profile_image=data.get("profile_image"),
        )

    @property
    def name(self) -> Optional[str]:
        return self.display_name or self.username


@dataclass
class Game:
    """Raw stored game: the guesses a player made on a given day."""
    player_id: int
    date: date
    guesses: List[str] = field(default_factory=list)
    user_data: Optional[UserData] = None
    id: Optional[str] = None


@dataclass
class GuessedGame:
    """A game replayed against the word of its day."""
    id: Optional[str]
    player_id: int
    date: date
    word: str
    original_guesses: Tuple[str, ...]
    guesses: Tuple[Guess, ...]
    all_guessed_characters: Dict[str, GuessCharacter]
    status: GameStatus
    user_data: Optional[UserData] = None

    @property
    def guess_count(self) -> int:
        return len(self.original_guesses)

    @property
    def is_finished(self) -> bool:
        return self.status.is_finished


@dataclass
class PublicGuessedGame:
    """Shareable view of a game."""
    id: Optional[str]
    date: date
    guesses: Tuple[Guess, ...]
    status: GameStatus
    word: Optional[str] = None


@dataclass(frozen=True)
class GameResult:
    """Outcome of one finished game, as kept in the rolling history."""
    date: date
    won: bool
    guess_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "won": self.won,
            "guess_count": self.guess_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameResult":
        return cls(
            date=date.fromisoformat(data["date"]),
            won=bool(data["won"]),
            guess_count=int(data["guess_count"]),
        )


@dataclass
class UserStats:
    """Running statistics of a player."""
    player_id: int
    total_games: int = 0
    total_wins: int = 0
    total_losses: int = 0
    current_streak: int = 0
    max_streak: int = 0
    last_game_won_date: Optional[date] = None
    win_guess_counts: Dict[int, int] = field(default_factory=dict)
    last30: List[GameResult] = field(default_factory=list)
    user_data: Optional[UserData] = None

    @property
    def last_result_date(self) -> Optional[date]:
        return self.last30[-1].date if self.last30 else None

    @property
    def win_percentage(self) -> float:
        return self.total_wins / self.total_games * 100 if self.total_games > 0 else 0.0


@dataclass
class LeaderboardEntry:
    """Score of a player over the trailing window."""
    player_id: int
    total_games_won: int
    total_games_won_guesses: int
    last_date: Optional[date]
    last14: List[GameResult]
    score: float
    user_data: Optional[UserData] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "total_games_won": self.total_games_won,
            "total_games_won_guesses": self.total_games_won_guesses,
            "last_date": self.last_date.isoformat() if self.last_date else None,
            "last14": [r.to_dict() for r in self.last14],
            "score": self.score,
            "user_data": self.user_data.to_dict() if self.user_data else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        last_date = data.get("last_date")
        return cls(
            player_id=int(data["player_id"]),
            total_games_won=int(data["total_games_won"]),
            total_games_won_guesses=int(data["total_games_won_guesses"]),
            last_date=date.fromisoformat(last_date) if last_date else None,
            last14=[GameResult.from_dict(r) for r in data.get("last14", [])],
            score=float(data["score"]),
            user_data=UserData.from_dict(data.get("user_data")),
        )


@dataclass
class Leaderboard:
    """Ranked entries as of a date."""
    date: date
    entries: List[LeaderboardEntry]
    last_updated_at: datetime


@dataclass
class PersonalLeaderboard(Leaderboard):
    """Leaderboard enriched with the entry of the player looking at it.

    personal_entry_index is the 0-based position in entries, or None when
    the player is outside the ranked entries.
    """
    personal_entry: Optional[LeaderboardEntry] = None
    personal_entry_index: Optional[int] = None

    @property
    def personal_rank(self) -> Optional[int]:
        if self.personal_entry_index is None:
            return None
        return self.personal_entry_index + 1
