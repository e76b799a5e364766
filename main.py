"""
main.py
-------
Entry point for the restaurant staff manager bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.errors import StoreConnectionError
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command, myid_command
from handlers.staff_handler import (
    staff_command,
    add_staff_command,
    edit_staff_command,
    delete_staff_command,
)
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", "🚀 Start the bot"),
    ("help", "📖 Show help"),
    ("staff", "👥 List staff members"),
    ("add_staff", "➕ Add a staff member"),
    ("edit_staff", "✏️ Edit a staff member"),
    ("delete_staff", "🗑️ Delete a staff member"),
    ("myid", "🆔 Your account ID"),
]


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands([BotCommand(c, d) for c, d in COMMANDS])
    logger.info("Bot commands menu registered successfully.")


def build_application(token: str = TELEGRAM_BOT_TOKEN) -> Application:
    """Build the Telegram application with every command handler registered."""
    app = Application.builder().token(token).post_init(set_bot_commands).build()
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("myid", myid_command))
    app.add_handler(CommandHandler("staff", staff_command))
    app.add_handler(CommandHandler("add_staff", add_staff_command))
    app.add_handler(CommandHandler("edit_staff", edit_staff_command))
    app.add_handler(CommandHandler("delete_staff", delete_staff_command))
    return app


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    try:
        init_pool()
    except StoreConnectionError:
        logger.critical("Cannot reach the database, staff management is unavailable.")
        raise
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = build_application()

    # ── 3. Start polling ──────────────────────────────────
    logger.info("🚀 Staff manager is running! Press Ctrl+C to stop.")
    try:
        app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    finally:
        # ── 4. Cleanup on shutdown ────────────────────────
        close_pool()
        logger.info("Staff manager stopped.")


if __name__ == "__main__":
    main()
