"""Configuration settings for the bot."""
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = Path(__file__).parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)

WORDS_DIR = Path(os.getenv("WORDS_DIR", PACKAGE_DIR / "words"))

# Game rules
MAX_GUESSES = 6
WORD_LENGTH = 5
DEFAULT_EPOCH = "2024-02-03"


def parse_id_list(value: Optional[str]) -> list[int]:
    """Parse a comma separated list of integer ids."""
    if not value:
        return []
    return [int(id_) for id_ in value.split(",") if id_.strip()]


def get_admin_ids() -> list[int]:
    """Get admin IDs from environment variable."""
    return parse_id_list(os.getenv("TELEGRAM_ADMIN_IDS", ""))


def get_disqualified_ids() -> frozenset[int]:
    """Get ids of players excluded from the ranked leaderboard."""
    return frozenset(parse_id_list(os.getenv("DISQUALIFIED_IDS", "11124")))


def get_epoch() -> date:
    """Get the date the word calendar starts at."""
    return date.fromisoformat(os.getenv("GAME_EPOCH", DEFAULT_EPOCH))


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///dailyword.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class BotSettings:
    """Bot configuration settings."""
    token: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    admin_ids: list[int] = field(default_factory=get_admin_ids)
    app_name: str = os.getenv("APP_NAME", "Dailyword")


@dataclass
class GameSettings:
    """Game rules, word lists and leaderboard scoring settings."""
    max_guesses: int = MAX_GUESSES
    word_length: int = WORD_LENGTH
    epoch: date = field(default_factory=get_epoch)
    answers_file: Path = WORDS_DIR / "answers.txt"
    words_file: Path = WORDS_DIR / "allowed.txt"
    disqualified_ids: frozenset[int] = field(default_factory=get_disqualified_ids)
    leaderboard_size: int = int(os.getenv("LEADERBOARD_SIZE", "10"))
    leaderboard_window_days: int = int(os.getenv("LEADERBOARD_WINDOW_DAYS", "14"))
    leaderboard_retries: int = int(os.getenv("LEADERBOARD_RETRIES", "3"))
    non_win_penalty: float = 1.5
    history_size: int = 30


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    port: int = int(os.getenv("METRICS_PORT", "0"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_bot_settings() -> BotSettings:
    """Get bot settings."""
    return BotSettings()


def get_game_settings() -> GameSettings:
    """Get game settings."""
    return GameSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    bot: BotSettings = field(default_factory=get_bot_settings)
    game: GameSettings = field(default_factory=get_game_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.game.max_guesses < 1:
            raise ValueError("max_guesses must be positive")

        if self.game.word_length < 1:
            raise ValueError("word_length must be positive")

        if self.game.leaderboard_size < 1:
            raise ValueError("LEADERBOARD_SIZE must be positive")

        if self.game.leaderboard_window_days < 1:
            raise ValueError("LEADERBOARD_WINDOW_DAYS must be positive")

        if self.game.leaderboard_window_days > self.game.history_size:
            raise ValueError("LEADERBOARD_WINDOW_DAYS cannot exceed the stored history size")

        if self.game.leaderboard_retries < 1:
            raise ValueError("LEADERBOARD_RETRIES must be at least 1")


# Create global settings instance
settings = Settings()
settings.validate()
