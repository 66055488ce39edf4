"""Main entry point for the bot."""
import asyncio
import logging
import signal

from dailyword import __version__
from dailyword.app import DailywordBot
from dailyword.config import settings
from dailyword.logging_config import setup_logging

logger = logging.getLogger("dailyword")


async def shutdown(sig: signal.Signals, task: asyncio.Task) -> None:
    """Cancel the bot task on an exit signal."""
    print()  # Print newline before logging
    logger.info(f"Received exit signal {sig.name}...")
    task.cancel()


def handle_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Handle exceptions in the event loop."""
    msg = context.get("exception", context["message"])
    logger.error(f"Caught exception: {msg}")


async def main() -> None:
    """Run the bot."""
    loop = asyncio.get_running_loop()
    loop.set_exception_handler(handle_exception)

    bot = DailywordBot()
    task = asyncio.create_task(bot.run_forever())

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, lambda s=sig: asyncio.create_task(shutdown(s, task)))

    logger.info("Starting bot...")
    try:
        await task
    except asyncio.CancelledError:
        pass


def run() -> None:
    """Console entry point."""
    setup_logging(f"Starting {settings.bot.app_name} v{__version__} ...")

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    run()
