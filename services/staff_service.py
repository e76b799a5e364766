"""
services/staff_service.py
--------------------------
Business logic behind the staff management screen.
Drives the add / edit / delete flows against the UserRepository and keeps
the list the view renders. The list only ever changes through a full
reload from the store, so a failed action never leaves a half-applied
state on screen.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from telegram.helpers import escape_markdown

from db.errors import StoreError
from models.role import Role
from models.staff import StaffRecord
from repositories.user_repo import UserRepository
from security.passwords import hash_password
from services.validation import (
    DuplicateEmailError,
    ValidationError,
    validate_new_staff,
    validate_staff_edit,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class FlowState(str, Enum):
    """Where the screen currently is in one of its flows."""
    IDLE = "idle"
    # add flow
    FORM_OPEN = "form_open"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"
    CHECKING_EMAIL = "checking_email"
    HASHING = "hashing"
    PERSISTING = "persisting"
    REFRESHING = "refreshing"
    # edit / delete flows
    CONFIRM = "confirm"
    APPLY = "apply"


@dataclass
class ActionResult:
    """Outcome of one user action, ready to be shown to the manager."""
    success: bool
    message: str
    record: Optional[StaffRecord] = None


def _cell(value: str) -> str:
    """Table cells live inside a code block, which a backtick would close."""
    return value.replace("`", "'")


class StaffService:
    """
    Orchestrates staff management for one screen (or one bot).

    Workflow for "add":
        1. Validate the form (pure, no I/O).
        2. Refuse duplicate emails.
        3. Hash the password.
        4. Persist via the repository.
        5. Reload the staff list.

    Edit and delete are confirm -> apply -> refresh.
    """

    def __init__(
        self,
        repo: Optional[UserRepository] = None,
        hasher: Callable[[str], str] = hash_password,
    ):
        self.repo = repo or UserRepository()
        self.hasher = hasher
        self.staff: list[StaffRecord] = []
        self.state = FlowState.IDLE
        self.pending_delete: Optional[int] = None

    # ── LIST ──────────────────────────────────────────────

    def refresh(self) -> list[StaffRecord]:
        """
        Reload the staff list from the store.

        Raises:
            StoreError: The current list is kept as it was.
        """
        self.staff = self.repo.list_staff()
        return self.staff

    def load(self) -> ActionResult:
        """Initial load of the screen."""
        try:
            self.refresh()
        except StoreError as e:
            logger.error(f"Failed to load staff: {e}")
            return ActionResult(False, "❌ Failed to load the staff list.")
        return ActionResult(True, self.render_table())

    def find(self, staff_id: int) -> Optional[StaffRecord]:
        """Look up a staff member in the currently displayed list."""
        return next((s for s in self.staff if s.id == staff_id), None)

    def render_table(self) -> str:
        """Render the current list as a fixed-width text table."""
        if not self.staff:
            return (
                "📭 No staff members yet.\n\n"
                f"💡 Use {escape_markdown('/add_staff')} to add one."
            )

        headers = ("ID", "Name", "Email", "Role")
        rows = [
            (str(s.id), _cell(s.name), _cell(s.email), _cell(s.role_name))
            for s in self.staff
        ]
        widths = [max(len(r[i]) for r in rows + [headers]) for i in range(len(headers))]

        def fmt(cols) -> str:
            return "  ".join(c.ljust(w) for c, w in zip(cols, widths)).rstrip()

        lines = [fmt(headers), fmt("-" * w for w in widths)]
        lines.extend(fmt(r) for r in rows)
        return f"👥 Staff ({len(self.staff)})\n```\n" + "\n".join(lines) + "\n```"

    # ── ADD ───────────────────────────────────────────────

    def begin_add(self) -> None:
        """Open the "add staff" form."""
        self.state = FlowState.FORM_OPEN

    def check_form(self, name: str, email: str, password: str, confirm_password: str) -> list[str]:
        """
        Re-evaluate the "add staff" form, as done on every input event.

        Returns:
            The problems found, empty when the form is valid.
        """
        self.state = FlowState.VALIDATING
        problems = validate_new_staff(name, email, password, confirm_password)
        self.state = FlowState.INVALID if problems else FlowState.VALID
        return problems

    def add_staff(self, name: str, email: str, password: str, confirm_password: str) -> StaffRecord:
        """
        Create a staff member. The displayed list is not reloaded here.

        Returns:
            The persisted StaffRecord, id populated and password hashed.

        Raises:
            ValidationError: The form is invalid (nothing was sent to the store).
            DuplicateEmailError: The email is already used by some account.
            StoreError: The store failed; the displayed list is unchanged.
        """
        problems = self.check_form(name, email, password, confirm_password)
        if problems:
            raise ValidationError(problems)

        try:
            self.state = FlowState.CHECKING_EMAIL
            if self.repo.email_exists(email):
                logger.info(f"Refused duplicate email {email!r}")
                self.state = FlowState.INVALID
                raise DuplicateEmailError(email)
            self.state = FlowState.HASHING
            record = StaffRecord(
                name=name,
                email=email,
                password=self.hasher(password),
                role_id=Role.STAFF,
                role_name=Role.STAFF.label,
            )

            self.state = FlowState.PERSISTING
            self.repo.add(record)
        except StoreError:
            self.state = FlowState.IDLE
            raise

        self.state = FlowState.IDLE
        logger.info(f"Staff #{record.id} added")
        return record

    def submit_add(self, name: str, email: str, password: str, confirm_password: str) -> ActionResult:
        """Run the add flow, reload the list and phrase the outcome for the manager."""
        try:
            record = self.add_staff(name, email, password, confirm_password)
        except DuplicateEmailError:
            return ActionResult(False, "❌ This email already exists.")
        except ValidationError as e:
            return ActionResult(False, "⚠️ " + "\n⚠️ ".join(e.problems))
        except StoreError as e:
            logger.error(f"Failed to add staff {email!r}: {e}")
            return ActionResult(False, f"❌ Error while adding: {e}")

        self.state = FlowState.REFRESHING
        refreshed = self._refresh_after_apply()
        self.state = FlowState.IDLE
        if not refreshed:
            return ActionResult(False, "⚠️ Staff added, but the list could not be refreshed.", record)
        return ActionResult(True, f"✅ Staff added successfully: {record}", record)

    # ── EDIT ──────────────────────────────────────────────

    def edit_staff(self, staff_id: int, name: str, email: str) -> ActionResult:
        """
        Change the name and email of a displayed staff member.

        The displayed list is only replaced by a reload after the update
        went through.
        """
        self.state = FlowState.CONFIRM
        current = self.find(staff_id)
        if current is None:
            self.state = FlowState.IDLE
            return ActionResult(False, f"⚠️ No staff member #{staff_id} in the list.")

        problems = validate_staff_edit(name, email)
        if problems:
            self.state = FlowState.IDLE
            return ActionResult(False, "⚠️ " + "\n⚠️ ".join(problems))

        changed = replace(current, name=name, email=email)
        self.state = FlowState.APPLY
        try:
            if email != current.email and self.repo.email_exists(email):
                self.state = FlowState.IDLE
                return ActionResult(False, "❌ This email already exists.")
            updated = self.repo.update(changed)
        except StoreError as e:
            self.state = FlowState.IDLE
            logger.error(f"Failed to update staff #{staff_id}: {e}")
            return ActionResult(False, "❌ Error while updating.")

        refreshed = self._refresh_after_apply()
        self.state = FlowState.IDLE
        if not updated:
            return ActionResult(False, f"⚠️ Staff member #{staff_id} was not changed (no longer on staff).")
        if not refreshed:
            return ActionResult(False, "⚠️ Staff updated, but the list could not be refreshed.", changed)
        return ActionResult(True, f"✅ Staff updated successfully: {changed}", changed)

    # ── DELETE ────────────────────────────────────────────

    def confirm_delete(self, staff_id: int) -> ActionResult:
        """Ask for confirmation before deleting a displayed staff member."""
        record = self.find(staff_id)
        if record is None:
            return ActionResult(False, f"⚠️ No staff member #{staff_id} in the list.")
        self.state = FlowState.CONFIRM
        self.pending_delete = staff_id
        return ActionResult(
            True,
            f"🗑️ Delete {record.name}? This action cannot be undone.\n"
            f"Send /delete_staff {staff_id} yes to confirm.",
            record,
        )

    def delete_staff(self, staff_id: int) -> ActionResult:
        """
        Delete a staff member, then reload the list.
        Only the member named by the last `confirm_delete` can be deleted.
        """
        if self.pending_delete != staff_id:
            return ActionResult(
                False,
                f"⚠️ Deletion of #{staff_id} was not confirmed.\n"
                f"Send /delete_staff {staff_id} first.",
            )
        self.pending_delete = None
        self.state = FlowState.APPLY
        try:
            deleted = self.repo.delete(staff_id)
        except StoreError as e:
            self.state = FlowState.IDLE
            logger.error(f"Failed to delete staff #{staff_id}: {e}")
            return ActionResult(False, "❌ Error while deleting.")

        refreshed = self._refresh_after_apply()
        self.state = FlowState.IDLE
        if not deleted:
            return ActionResult(False, f"⚠️ Staff member #{staff_id} was not deleted (no longer on staff).")
        if not refreshed:
            return ActionResult(False, "⚠️ Staff deleted, but the list could not be refreshed.")
        return ActionResult(True, "🗑️ Staff deleted successfully.")

    # ── HELPERS ───────────────────────────────────────────

    def _refresh_after_apply(self) -> bool:
        """Reload after an edit or delete; False when the reload failed."""
        try:
            self.refresh()
        except StoreError as e:
            logger.error(f"Failed to refresh staff list: {e}")
            return False
        return True
