"""Leaderboard scoring and ranking over a trailing window of days."""
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from dailyword.config import GameSettings, settings
from dailyword.models.game_models import (
    GameResult,
    Leaderboard,
    LeaderboardEntry,
    PersonalLeaderboard,
    UserData,
    UserStats,
)

logger = logging.getLogger(__name__)

UserDataLookup = Callable[[int, date], Optional[UserData]]
StatsLoader = Callable[[int], Optional[UserStats]]


class LeaderboardService:
    """Scores players and maintains the ranked top entries.

    Every game that is not won inside the window costs as much as
    ``max_guesses * non_win_penalty`` guesses, so playing daily and winning
    in few guesses both raise the score.
    """

    def __init__(
        self,
        window_days: int = 14,
        max_guesses: int = 6,
        size: int = 10,
        non_win_penalty: float = 1.5,
        disqualified_ids: Iterable[int] = (),
        user_data_lookup: Optional[UserDataLookup] = None,
    ):
        self.window_days = window_days
        self.max_guesses = max_guesses
        self.size = size
        self.non_win_penalty = non_win_penalty
        self.disqualified_ids: FrozenSet[int] = frozenset(disqualified_ids)
        self.user_data_lookup = user_data_lookup

    @classmethod
    def from_settings(
        cls,
        game_settings: Optional[GameSettings] = None,
        user_data_lookup: Optional[UserDataLookup] = None,
    ) -> "LeaderboardService":
        game_settings = game_settings or settings.game
        return cls(
            window_days=game_settings.leaderboard_window_days,
            max_guesses=game_settings.max_guesses,
            size=game_settings.leaderboard_size,
            non_win_penalty=game_settings.non_win_penalty,
            disqualified_ids=game_settings.disqualified_ids,
            user_data_lookup=user_data_lookup,
        )

    @property
    def max_score(self) -> float:
        return self.window_days * self.max_guesses * self.non_win_penalty

    def is_disqualified(self, player_id: int) -> bool:
        return player_id in self.disqualified_ids

    def compute_score(self, wins: int, won_guesses: int) -> float:
        """Score for a number of wins and the guesses spent on them."""
        total_guesses = won_guesses + self.max_guesses * self.non_win_penalty * (self.window_days - wins)
        return self.max_score - total_guesses

    def score_entry(self, stats: UserStats, as_of: date) -> LeaderboardEntry:
        """Score a player over the window ending at as_of.

        The window ends the day before as_of when the player has no
        result on as_of itself, so today's unplayed game costs nothing yet.
        """
        results: Dict[date, GameResult] = {r.date: r for r in stats.last30}
        to_date = as_of if as_of in results else as_of - timedelta(days=1)

        last14: List[GameResult] = []
        last_date: Optional[date] = None
        wins = 0
        won_guesses = 0
        for offset in range(self.window_days - 1, -1, -1):
            day = to_date - timedelta(days=offset)
            result = results.get(day)
            if result is None:
                continue
            last14.append(result)
            if result.won:
                wins += 1
                won_guesses += result.guess_count
            last_date = day

        user_data = stats.user_data
        if user_data is None and last_date is not None and self.user_data_lookup is not None:
            user_data = self.user_data_lookup(stats.player_id, last_date)

        return LeaderboardEntry(
            player_id=stats.player_id,
            total_games_won=wins,
            total_games_won_guesses=won_guesses,
            last_date=last_date,
            last14=last14,
            score=self.compute_score(wins, won_guesses),
            user_data=user_data,
        )

    def rank_entries(self, entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
        """Top entries by score; ties go to more wins, then lower player id."""
        eligible = [e for e in entries if not self.is_disqualified(e.player_id)]
        eligible.sort(key=lambda e: (-e.score, -e.total_games_won, e.player_id))
        return eligible[: self.size]

    def with_personal_entry(
        self,
        leaderboard: Leaderboard,
        player_id: int,
        load_stats: StatsLoader,
    ) -> PersonalLeaderboard:
        """Attach the player's own entry without touching the leaderboard."""
        personal = PersonalLeaderboard(
            date=leaderboard.date,
            entries=list(leaderboard.entries),
            last_updated_at=leaderboard.last_updated_at,
        )
        for index, entry in enumerate(leaderboard.entries):
            if entry.player_id == player_id:
                personal.personal_entry = entry
                personal.personal_entry_index = index
                return personal

        stats = load_stats(player_id)
        if stats is not None:
            personal.personal_entry = self.score_entry(stats, leaderboard.date)
        return personal

    def update_leaderboard(self, stats: UserStats, leaderboard: Leaderboard, now: datetime) -> Leaderboard:
        """Re-score one player and re-rank.

        The leaderboard date moves forward to the player's latest result.
        Disqualified players leave the leaderboard as it was.
        """
        if self.is_disqualified(stats.player_id):
            logger.info(f"Player {stats.player_id} is disqualified, leaderboard not updated")
            return leaderboard

        last_result_date = stats.last_result_date
        as_of = leaderboard.date
        if last_result_date is not None and last_result_date > as_of:
            as_of = last_result_date

        entry = self.score_entry(stats, as_of)
        entries = [e for e in leaderboard.entries if e.player_id != stats.player_id]
        entries.append(entry)
        return Leaderboard(date=as_of, entries=self.rank_entries(entries), last_updated_at=now)

    def build_leaderboard(self, all_stats: Iterable[UserStats], now: datetime, floor_date: date) -> Leaderboard:
        """Build the leaderboard from scratch, as of the latest result seen."""
        eligible = [s for s in all_stats if not self.is_disqualified(s.player_id)]
        as_of = floor_date
        for stats in eligible:
            last_result_date = stats.last_result_date
            if last_result_date is not None and last_result_date > as_of:
                as_of = last_result_date

        entries = [self.score_entry(s, as_of) for s in eligible]
        logger.info(f"Built leaderboard as of {as_of} from {len(eligible)} players")
        return Leaderboard(date=as_of, entries=self.rank_entries(entries), last_updated_at=now)
