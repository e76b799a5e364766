"""
security/auth.py
-----------------
Authentication middleware for the staff management bot.
Only managers may list or change staff accounts.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

import config
from utils.logger import get_logger

logger = get_logger(__name__)


def is_manager(user_id: int) -> bool:
    """
    Whitelist check against MANAGER_USER_IDS.
    An empty whitelist means dev mode: everyone is a manager.
    """
    if not config.MANAGER_USER_IDS:
        return True
    return user_id in config.MANAGER_USER_IDS


def manager_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted managers.

    Usage:
        @manager_only
        async def my_handler(update, context):
            ...

    Unauthorized attempts are logged and answered with a refusal.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_manager(user.id):
            logger.warning(
                f"🚫 Unauthorized access attempt: user_id={user.id}, "
                f"username={user.username}, name={user.first_name}"
            )
            await update.message.reply_text(
                "⛔ Sorry, staff management is restricted to managers."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
