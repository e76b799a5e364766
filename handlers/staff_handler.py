"""
handlers/staff_handler.py
--------------------------
Handles the staff management commands.
Parses the command arguments and delegates everything else to StaffService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.staff_service import StaffService
from security.auth import manager_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
staff_service = StaffService()

ADD_USAGE = (
    "⚠️ Usage: /add_staff <name> | <email> | <password> | <confirm password>\n"
    "Example: /add_staff Ana Silva | ana@example.com | secret1 | secret1"
)
EDIT_USAGE = (
    "⚠️ Usage: /edit_staff <id> <name> | <email>\n"
    "Example: /edit_staff 5 Ana Silva | ana.silva@example.com"
)
DELETE_USAGE = "⚠️ Usage: /delete_staff <id>\nExample: /delete_staff 5"


def _split_fields(text: str) -> list[str]:
    """Split a `a | b | c` argument string into stripped fields."""
    return [p.strip() for p in text.split("|")]


def _unpad(field: str) -> str:
    """Drop the single space written around a `|` separator, nothing more."""
    if field.startswith(" "):
        field = field[1:]
    if field.endswith(" "):
        field = field[:-1]
    return field


def command_payload(text: str) -> str:
    """Everything after the command word; trailing whitespace is kept."""
    text = text.lstrip()
    command = text.split(maxsplit=1)[0] if text else ""
    return text[len(command):].lstrip()


def parse_add_args(text: str) -> tuple[str, str, str, str] | None:
    """
    Parse the `/add_staff` payload (the raw text after the command).

    Format: name | email | password | confirm password
    Name and email are stripped. Passwords only lose the one space next to
    each separator, so any other leading or trailing space is kept.
    Empty fields are kept so the validator can report them.
    """
    parts = text.split("|")
    if len(parts) != 4:
        return None
    name, email, password, confirm = parts
    return name.strip(), email.strip(), _unpad(password), _unpad(confirm.rstrip("\n"))


def parse_edit_args(args: list[str]) -> tuple[int, str, str] | None:
    """
    Parse `/edit_staff` arguments.

    Format: id name | email
    """
    if not args:
        return None
    try:
        staff_id = int(args[0])
    except ValueError:
        return None
    parts = _split_fields(" ".join(args[1:]))
    if len(parts) != 2:
        return None
    return staff_id, parts[0], parts[1]


@manager_only
@rate_limited
async def staff_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /staff command - show the staff table."""
    result = staff_service.load()
    await update.message.reply_text(result.message, parse_mode="Markdown")


@manager_only
@rate_limited
async def add_staff_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_staff command - create a staff member.
    Usage: /add_staff Ana Silva | ana@example.com | secret1 | secret1
    """
    parsed = parse_add_args(command_payload(update.message.text or ""))
    if parsed is None:
        await update.message.reply_text(ADD_USAGE)
        return

    staff_service.begin_add()
    result = staff_service.submit_add(*parsed)
    if result.success:
        logger.info(f"Manager {update.effective_user.id} added staff #{result.record.id}")
    await update.message.reply_text(result.message)


@manager_only
@rate_limited
async def edit_staff_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /edit_staff command - change a staff member's name and email.
    Usage: /edit_staff 5 Ana Silva | ana.silva@example.com
    """
    parsed = parse_edit_args(context.args or [])
    if parsed is None:
        await update.message.reply_text(EDIT_USAGE)
        return

    staff_id, name, email = parsed
    if staff_service.find(staff_id) is None:
        # The manager may not have listed staff since the bot started
        staff_service.load()
    result = staff_service.edit_staff(staff_id, name, email)
    await update.message.reply_text(result.message)


@manager_only
@rate_limited
async def delete_staff_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /delete_staff command - delete a staff member.
    Usage: /delete_staff 5        (asks for confirmation)
           /delete_staff 5 yes    (deletes)
    """
    if not context.args:
        await update.message.reply_text(DELETE_USAGE)
        return

    try:
        staff_id = int(context.args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The staff id must be a whole number.")
        return

    confirmed = len(context.args) > 1 and context.args[1].lower() in ("yes", "y")
    if not confirmed:
        if staff_service.find(staff_id) is None:
            staff_service.load()
        result = staff_service.confirm_delete(staff_id)
        await update.message.reply_text(result.message)
        return

    result = staff_service.delete_staff(staff_id)
    if result.success:
        logger.info(f"Manager {update.effective_user.id} deleted staff #{staff_id}")
    await update.message.reply_text(result.message)
