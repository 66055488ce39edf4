"""Telegram handlers for the daily word game."""
import logging
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackContext

from dailyword import monitoring
from dailyword.config import settings
from dailyword.models.base import SessionLocal
from dailyword.models.game_models import GuessValidationStatus, UserData
from dailyword.services.game_aggregator import to_public_game
from dailyword.services.game_service import GameError, GameService, InvalidGuessError
from dailyword.services.message_builder import (
    render_game,
    render_leaderboard,
    render_public_game,
    render_share,
    render_stats,
    validation_message,
)

# Get logger for this module
logger = logging.getLogger(__name__)

# Button texts
PLAY = "🎯 Today's Game"
VIEW_STATISTICS = "📊 Statistics"
VIEW_LEADERBOARD = "🏆 Leaderboard"
SHARE = "📤 Share"

ERR_MSG_GAME = "Something went wrong with your game. Please /start again."
ERR_MSG_GAME_NOT_FOUND = "Game not found."


def main_menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(PLAY, callback_data="play")],
        [
            InlineKeyboardButton(VIEW_STATISTICS, callback_data="statistics"),
            InlineKeyboardButton(VIEW_LEADERBOARD, callback_data="leaderboard"),
        ],
        [InlineKeyboardButton(SHARE, callback_data="share")],
    ])


def user_data_from_update(update: Update) -> Optional[UserData]:
    """Profile snapshot of the Telegram user."""
    user = update.effective_user
    if not user:
        return None
    return UserData(username=user.username, display_name=user.full_name)


async def log_received(update: Update, context_type: str) -> None:
    """Log message."""
    txt = ""
    if update.callback_query:
        txt = f" {update.callback_query.data}"
    elif update.message and update.message.text:
        txt = f" {update.message.text}"
    logger.info(
        f"Received @{context_type:11} from user {update.effective_user.username} "
        f"({update.effective_user.id}){txt}"
    )


async def reply(update: Update, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
    """Answer with a new message, or edit the message whose button was pressed."""
    if update.callback_query:
        await update.callback_query.answer()
        await update.callback_query.edit_message_text(text, reply_markup=reply_markup)
    else:
        await update.message.reply_text(text, reply_markup=reply_markup)


async def handle_start(update: Update, context: CallbackContext) -> None:
    """Start or resume today's game."""
    await log_received(update, "start")
    with monitoring.request_duration.labels(handler="start").time():
        db = SessionLocal()
        try:
            service = GameService(db)
            game = service.load_or_create(update.effective_user.id, user_data_from_update(update))
            message = render_game(
                game, service.clock(), service.game_settings.max_guesses, service.game_settings.word_length
            )
            if not game.is_finished and game.guess_count == 0:
                message = (
                    f"Welcome to {settings.bot.app_name}, {update.effective_user.first_name}! 👋\n\n"
                    f"Guess the word of the day in {service.game_settings.max_guesses} tries.\n\n"
                    + message
                )
            await reply(update, message, main_menu_keyboard() if game.is_finished else None)
        finally:
            db.close()


async def handle_guess(update: Update, context: CallbackContext) -> None:
    """Treat a text message as a guess for today's game."""
    await log_received(update, "guess")
    with monitoring.request_duration.labels(handler="guess").time():
        db = SessionLocal()
        try:
            service = GameService(db)
            game = service.load_or_create(update.effective_user.id, user_data_from_update(update))
            max_guesses = service.game_settings.max_guesses
            word_length = service.game_settings.word_length
            if game.is_finished:
                await reply(update, render_game(game, service.clock(), max_guesses, word_length), main_menu_keyboard())
                return

            status = service.validate_guess(update.message.text, game.original_guesses)
            if status is not GuessValidationStatus.VALID:
                await reply(update, validation_message(status, word_length))
                return

            try:
                game = service.guess(game, update.message.text)
            except InvalidGuessError as e:
                await reply(update, validation_message(e.status, word_length))
                return
            except GameError as e:
                logger.warning(f"Guess rejected for user {update.effective_user.id}: {e}")
                await reply(update, ERR_MSG_GAME)
                return

            markup = main_menu_keyboard() if game.is_finished else None
            await reply(update, render_game(game, service.clock(), max_guesses, word_length), markup)
        finally:
            db.close()


async def handle_statistics(update: Update, context: CallbackContext) -> None:
    """Show the player's statistics."""
    await log_received(update, "statistics")
    db = SessionLocal()
    try:
        service = GameService(db)
        stats = service.load_stats(update.effective_user.id)
        await reply(update, render_stats(stats, service.game_settings.max_guesses), main_menu_keyboard())
    finally:
        db.close()


async def handle_leaderboard(update: Update, context: CallbackContext) -> None:
    """Show the leaderboard with the player's own position."""
    await log_received(update, "leaderboard")
    with monitoring.request_duration.labels(handler="leaderboard").time():
        db = SessionLocal()
        try:
            service = GameService(db)
            leaderboard = service.load_leaderboard(update.effective_user.id)
            await reply(update, render_leaderboard(leaderboard), main_menu_keyboard())
        finally:
            db.close()


async def handle_share(update: Update, context: CallbackContext) -> None:
    """Share today's result, or look at a game by id (/share <game id>)."""
    await log_received(update, "share")
    db = SessionLocal()
    try:
        service = GameService(db)
        max_guesses = service.game_settings.max_guesses
        args = context.args if context and context.args else []
        if args:
            game = service.load(args[0])
            if game is None:
                await reply(update, ERR_MSG_GAME_NOT_FOUND)
                return
            is_owner = game.player_id == update.effective_user.id
            await reply(update, render_public_game(to_public_game(game, is_owner), max_guesses))
            return

        game = service.repository.load_by_player_and_date(update.effective_user.id, service.today())
        public_game = service.load_public(game.id, is_owner=False) if game else None
        message = render_share(public_game, settings.bot.app_name, max_guesses)
        if public_game is not None:
            message += f"\n\nGame id: {public_game.id}"
        await reply(update, message, main_menu_keyboard())
    finally:
        db.close()


async def handle_callback(update: Update, context: CallbackContext) -> None:
    """Route inline button presses."""
    data = update.callback_query.data
    if data == "play":
        await handle_start(update, context)
    elif data == "statistics":
        await handle_statistics(update, context)
    elif data == "leaderboard":
        await handle_leaderboard(update, context)
    elif data == "share":
        await handle_share(update, context)
    else:
        logger.warning(f"Unknown callback data: {data}")
        await update.callback_query.answer()


async def handle_error(update: object, context: CallbackContext) -> None:
    """Log errors raised by handlers and notify admins."""
    error = context.error
    logger.error("Exception while handling an update", exc_info=error)
    monitoring.error_count.labels(error_type=type(error).__name__).inc()

    for admin_id in settings.bot.admin_ids:
        try:
            await context.bot.send_message(
                chat_id=admin_id,
                text=f"⚠️ ERROR Alert:\n\n{type(error).__name__}: {error}",
            )
        except Exception as e:
            logger.warning(f"Could not notify admin {admin_id}: {e}")
