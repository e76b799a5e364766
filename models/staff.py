"""
models/staff.py
---------------
Domain model for a row of the users table as seen by the staff screen.
"""

from dataclasses import dataclass, field

from models.role import Role


@dataclass
class StaffRecord:
    """
    Represents one user account (staff members in practice).

    Attributes:
        name: Display name.
        email: Login email, unique across all users whatever their role.
        password: Plaintext while a new member is being created, a salted
            hash once persisted or loaded from the store.
        role_id: Role identifier (Role.STAFF for staff members).
        role_name: Display name of the role, joined from `roles`. Read-only.
        id: Database primary key (0 for records not yet persisted).
    """
    name: str
    email: str
    password: str = field(default="", repr=False)
    role_id: int = Role.STAFF
    role_name: str = Role.STAFF.label
    id: int = 0

    def is_new(self) -> bool:
        """Returns True if the store has not assigned an id yet."""
        return self.id == 0

    def is_staff(self) -> bool:
        """Returns True if this record belongs to a staff member."""
        return self.role_id == Role.STAFF

    def __str__(self) -> str:
        return f"#{self.id} {self.name} <{self.email}> ({self.role_name})"
