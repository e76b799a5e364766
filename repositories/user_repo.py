"""
repositories/user_repo.py
--------------------------
Data access layer for user accounts and, in particular, staff members.
All SQL touching the `users` table lives here. Every statement is
parameterized and runs on a connection borrowed for that call only.
"""

import psycopg2

from db.connection import scoped_connection
from db.errors import QueryError
from models.role import Role
from models.staff import StaffRecord
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for role-scoped CRUD operations on the users table."""

    # ── READ ──────────────────────────────────────────────

    def list_by_role(self, role_id: int) -> list[StaffRecord]:
        """
        Fetch every user having the given role, with the role name joined.

        Args:
            role_id: Role to filter on (see models.role.Role).

        Returns:
            List of StaffRecord ordered by name ascending, empty if none match.

        Raises:
            QueryError: If the query fails.
        """
        sql = """
            SELECT u.id, u.name, u.email, u.password, u.role_id, r.name AS role_name
            FROM users u
            JOIN roles r ON u.role_id = r.id
            WHERE u.role_id = %s
            ORDER BY u.name;
        """
        try:
            with scoped_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (int(role_id),))
                    return [self._row_to_record(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to list users with role {role_id}: {e}")
            raise QueryError(f"Could not load users with role {role_id}") from e

    def list_staff(self) -> list[StaffRecord]:
        """Fetch all staff members ordered by name."""
        return self.list_by_role(Role.STAFF)

    def email_exists(self, email: str) -> bool:
        """
        Check whether any user, whatever their role, already uses this email.
        Must be called before `add`.
        """
        sql = "SELECT COUNT(*) FROM users WHERE email = %s;"
        try:
            with scoped_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (email,))
                    row = cur.fetchone()
                    return bool(row) and row[0] > 0
        except psycopg2.Error as e:
            logger.error(f"Failed to check email {email!r}: {e}")
            raise QueryError("Could not check email uniqueness") from e

    # ── CREATE ────────────────────────────────────────────

    def add(self, record: StaffRecord) -> StaffRecord:
        """
        Insert a new user row.

        The password must already be hashed; this layer stores it as given.

        Args:
            record: The StaffRecord to persist (id is ignored).

        Returns:
            The same StaffRecord with its `id` set to the generated key.

        Raises:
            QueryError: If the insert fails or affects no row.
        """
        sql = """
            INSERT INTO users (name, email, password, role_id)
            VALUES (%s, %s, %s, %s)
            RETURNING id;
        """
        try:
            with scoped_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (
                        record.name, record.email, record.password, int(record.role_id),
                    ))
                    if cur.rowcount == 0:
                        raise QueryError("Insert failed, no row affected.")
                    row = cur.fetchone()
                    if row:
                        record.id = row[0]
        except psycopg2.Error as e:
            logger.error(f"Failed to add user {record.email!r}: {e}")
            raise QueryError(f"Could not add {record.name}") from e
        logger.info(f"Added user #{record.id} with role {int(record.role_id)}")
        return record

    # ── UPDATE ────────────────────────────────────────────

    def update(self, record: StaffRecord) -> bool:
        """
        Update the name and email of a staff member.

        Password and role are never touched. Rows that do not belong to
        a staff member are left alone without raising.

        Returns:
            True if a row was updated, False if the id matched no staff member.
        """
        sql = "UPDATE users SET name = %s, email = %s WHERE id = %s AND role_id = %s;"
        try:
            with scoped_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (record.name, record.email, record.id, int(Role.STAFF)))
                    updated = cur.rowcount > 0
        except psycopg2.Error as e:
            logger.error(f"Failed to update staff #{record.id}: {e}")
            raise QueryError(f"Could not update staff #{record.id}") from e
        if not updated:
            logger.warning(f"Update matched no staff member for id #{record.id}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, staff_id: int) -> bool:
        """
        Delete a staff member by ID. Users of any other role are never deleted.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM users WHERE id = %s AND role_id = %s;"
        try:
            with scoped_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (staff_id, int(Role.STAFF)))
                    deleted = cur.rowcount > 0
        except psycopg2.Error as e:
            logger.error(f"Failed to delete staff #{staff_id}: {e}")
            raise QueryError(f"Could not delete staff #{staff_id}") from e
        if deleted:
            logger.info(f"Deleted staff #{staff_id}")
        else:
            logger.warning(f"Delete matched no staff member for id #{staff_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_record(row: tuple) -> StaffRecord:
        """Convert a (id, name, email, password, role_id, role_name) row."""
        return StaffRecord(
            id=row[0],
            name=row[1],
            email=row[2],
            password=row[3],
            role_id=row[4],
            role_name=row[5],
        )
