"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import manager_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🍽️ *Restaurant staff manager*

*👥 Staff commands:*
/staff - show all staff members
/add\\_staff - add a member: `name | email | password | confirm`
/edit\\_staff - rename a member: `id name | email`
/delete\\_staff - delete a member: `id` then `id yes`

*🔧 Other commands:*
/start - start the bot
/help - show this help
/myid - show your Telegram ID
"""


@manager_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet the manager."""
    user = update.effective_user
    logger.info(f"Manager {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"I manage the restaurant's staff accounts.\n\n"
        f"Send /help to see every command.",
    )


@manager_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the caller's Telegram ID for whitelisting."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your account ID: `{user.id}`\n"
        f"Add it to `MANAGER_USER_IDS` in the `.env` file to grant manager access.",
        parse_mode="Markdown",
    )
