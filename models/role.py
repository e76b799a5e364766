"""
models/role.py
--------------
Application roles, mirrored by the seeded rows of the `roles` table.
"""

from enum import IntEnum


class Role(IntEnum):
    """Role identifiers stored in `users.role_id`."""
    ADMIN = 1
    STAFF = 2

    @property
    def label(self) -> str:
        """Display name, as stored in `roles.name`."""
        return self.name.capitalize()
