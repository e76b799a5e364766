"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist
and seeds the fixed roles.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import scoped_connection
from models.role import Role
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Roles table: fixed set of application roles (admin, staff)
CREATE TABLE IF NOT EXISTS roles (
    id              INT PRIMARY KEY,
    name            VARCHAR(50) UNIQUE NOT NULL
);

-- Users table: every account of the restaurant application, any role
CREATE TABLE IF NOT EXISTS users (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) NOT NULL,
    email           VARCHAR(255) UNIQUE NOT NULL,
    password        VARCHAR(255) NOT NULL,
    role_id         INT NOT NULL REFERENCES roles(id)
);

-- Staff listing filters by role and sorts by name
CREATE INDEX IF NOT EXISTS idx_users_role_name ON users(role_id, name);
"""

SEED_ROLES_SQL = """
    INSERT INTO roles (id, name) VALUES (%s, %s)
    ON CONFLICT (id) DO NOTHING;
"""


def create_tables() -> None:
    """
    Execute the schema SQL and seed the roles table.
    Safe to call multiple times (uses IF NOT EXISTS / ON CONFLICT).
    """
    try:
        with scoped_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                for role in Role:
                    cur.execute(SEED_ROLES_SQL, (int(role), role.label))
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("✅ Database schema created successfully.")
