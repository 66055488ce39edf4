"""Game, statistics and leaderboard services."""
