"""
services/validation.py
----------------------
Form validation for the staff screen.
Pure functions: no I/O and no state, so the presentation layer can call
them on every input event.
"""

from config import STAFF_MIN_PASSWORD_LENGTH

# Configuration may only raise this
MIN_PASSWORD_LENGTH = 6


class ValidationError(Exception):
    """A form was refused before any call to the store."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class DuplicateEmailError(ValidationError):
    """The email is already used by another account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__([f"The email {email} is already in use."])


def validate_new_staff(
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    min_password_length: int = STAFF_MIN_PASSWORD_LENGTH,
) -> list[str]:
    """
    Check the fields of the "add staff" form.

    Returns:
        Human-readable problems, empty when the form may be submitted.
    """
    min_password_length = max(MIN_PASSWORD_LENGTH, min_password_length)
    problems = []
    if not name:
        problems.append("Name is required.")
    if not email:
        problems.append("Email is required.")
    if len(password) < min_password_length:
        problems.append(f"Password must be at least {min_password_length} characters.")
    if password != confirm_password:
        problems.append("Passwords do not match.")
    return problems


def is_valid_new_staff(name: str, email: str, password: str, confirm_password: str) -> bool:
    """True iff the "add staff" form may be submitted."""
    return not validate_new_staff(name, email, password, confirm_password)


def validate_staff_edit(name: str, email: str) -> list[str]:
    """Check the fields of the "edit staff" form (name and email only)."""
    problems = []
    if not name:
        problems.append("Name is required.")
    if not email:
        problems.append("Email is required.")
    return problems
