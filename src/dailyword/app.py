"""Main application entry point."""
import asyncio
import logging
from typing import Optional

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from dailyword.bot import (
    handle_callback,
    handle_error,
    handle_guess,
    handle_leaderboard,
    handle_share,
    handle_start,
    handle_statistics,
)
from dailyword.config import settings
from dailyword.models.base import init_db
from dailyword.monitoring import start_monitoring
from dailyword.services.word_calendar import get_default_calendar, get_default_dictionary


class DailywordBot:
    """Main application class."""

    def __init__(self):
        """Initialize the application."""
        self.application: Optional[Application] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    def build_application(self) -> Application:
        """Create the Telegram application and register the handlers."""
        if not settings.bot.token:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is not set")

        application = Application.builder().token(settings.bot.token).build()
        application.add_handler(CommandHandler("start", handle_start))
        application.add_handler(CommandHandler("stats", handle_statistics))
        application.add_handler(CommandHandler("leaderboard", handle_leaderboard))
        application.add_handler(CommandHandler("share", handle_share))
        application.add_handler(CallbackQueryHandler(handle_callback))
        application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_guess))
        application.add_error_handler(handle_error)
        return application

    async def start(self) -> None:
        """Start the application."""
        if self.running:
            return

        try:
            # Initialize database
            init_db()
            self.logger.info("Database initialized")

            # Load word lists once so a broken file fails at start
            calendar = get_default_calendar()
            dictionary = get_default_dictionary()
            self.logger.info(f"Word calendar ready: {len(calendar.words)} answers, {len(dictionary)} accepted guesses")

            if settings.monitoring.port:
                start_monitoring(settings.monitoring.port)
                self.logger.info(f"Metrics server listening on port {settings.monitoring.port}")

            self.application = self.build_application()
            self.logger.info("Application created")

            await self.application.initialize()
            await self.application.start()
            await self.application.updater.start_polling()
            self.logger.info("Application started")

            self.running = True

        except Exception as e:
            self.logger.error(f"Failed to start application: {e}")
            await self.stop()
            raise

    async def stop(self) -> None:
        """Stop the application."""
        if self.application is None:
            self.running = False
            return

        try:
            if self.application.updater and self.application.updater.running:
                await self.application.updater.stop()
            if self.application.running:
                await self.application.stop()
            await self.application.shutdown()
            self.logger.info("Application stopped")
        except Exception as e:
            self.logger.error(f"Error while stopping application: {e}")
        finally:
            self.application = None
            self.running = False

    async def run_forever(self) -> None:
        """Start the bot and keep it running until cancelled."""
        await self.start()
        try:
            while True:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            pass
        finally:
            self.logger.info("Cleaning up...")
            await self.stop()
