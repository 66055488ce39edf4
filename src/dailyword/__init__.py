"""Daily word-guessing game delivered through a Telegram bot."""

__version__ = "0.1.0"
