"""Monitoring configuration for the bot."""
from prometheus_client import Counter, Histogram, start_http_server

# Game metrics
games_started = Counter(
    "dailyword_games_started_total",
    "Total number of daily games created",
)

guesses_submitted = Counter(
    "dailyword_guesses_submitted_total",
    "Total number of accepted guesses",
)

invalid_guesses = Counter(
    "dailyword_invalid_guesses_total",
    "Total number of rejected guesses",
    ["status"],
)

games_finished = Counter(
    "dailyword_games_finished_total",
    "Total number of finished games",
    ["status"],
)

winning_guess_count = Histogram(
    "dailyword_winning_guess_count",
    "Number of guesses used to win a game",
    buckets=[1, 2, 3, 4, 5, 6],
)

# Statistics and leaderboard metrics
stats_rebuilds = Counter(
    "dailyword_stats_rebuilds_total",
    "Total number of player statistics rebuilt from game history",
)

stats_conflicts = Counter(
    "dailyword_stats_conflicts_total",
    "Total number of player statistics version conflicts",
)

leaderboard_updates = Counter(
    "dailyword_leaderboard_updates_total",
    "Total number of leaderboard writes",
    ["kind"],  # rebuild, update
)

leaderboard_conflicts = Counter(
    "dailyword_leaderboard_conflicts_total",
    "Total number of leaderboard version conflicts",
)

# Error metrics
error_count = Counter(
    "dailyword_errors_total",
    "Total number of errors encountered",
    ["error_type"],
)

# Performance metrics
request_duration = Histogram(
    "dailyword_request_duration_seconds",
    "Duration of bot requests in seconds",
    ["handler"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
