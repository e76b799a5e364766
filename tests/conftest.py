from unittest.mock import MagicMock

import pytest

import db.connection as dbconn
from db.errors import QueryError
from models.role import Role
from models.staff import StaffRecord
from security import rate_limiter


class FakeUserRepository:
    """In-memory stand-in for UserRepository with the same role scoping."""

    def __init__(self):
        self.rows: dict[int, StaffRecord] = {}
        self.next_id = 1
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _call(self, op: str) -> None:
        self.calls.append(op)
        if op in self.fail_on:
            raise QueryError(f"{op} failed")

    def list_by_role(self, role_id):
        self._call("list_by_role")
        rows = [r for r in self.rows.values() if r.role_id == role_id]
        return [StaffRecord(**vars(r)) for r in sorted(rows, key=lambda r: r.name)]

    def list_staff(self):
        return self.list_by_role(Role.STAFF)

    def email_exists(self, email):
        self._call("email_exists")
        return any(r.email == email for r in self.rows.values())

    def add(self, record):
        self._call("add")
        record.id = self.next_id
        self.next_id += 1
        record.role_name = Role(record.role_id).label
        self.rows[record.id] = StaffRecord(**vars(record))
        return record

    def update(self, record):
        self._call("update")
        row = self.rows.get(record.id)
        if row is None or row.role_id != Role.STAFF:
            return False
        row.name, row.email = record.name, record.email
        return True

    def delete(self, staff_id):
        self._call("delete")
        row = self.rows.get(staff_id)
        if row is None or row.role_id != Role.STAFF:
            return False
        del self.rows[staff_id]
        return True

    def seed(self, name, email, role=Role.STAFF, password="hashed"):
        """Insert a row directly, bypassing failure injection."""
        record = StaffRecord(name=name, email=email, password=password, role_id=role)
        fail_on, self.fail_on = self.fail_on, set()
        try:
            return self.add(record)
        finally:
            self.fail_on = fail_on
            self.calls.pop()


@pytest.fixture
def fake_repo():
    return FakeUserRepository()


@pytest.fixture
def fake_hasher():
    return lambda plaintext: f"hashed${plaintext}"


@pytest.fixture
def db_cursor(monkeypatch):
    """Patch the connection pool with mocks and hand back the cursor."""
    cursor = MagicMock()
    cursor.rowcount = 1
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    pool = MagicMock()
    pool.getconn.return_value = conn
    monkeypatch.setattr(dbconn, "_pool", pool)
    cursor.conn = conn
    cursor.pool = pool
    return cursor


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()
