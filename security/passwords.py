"""
security/passwords.py
---------------------
One-way password hashing for user accounts.
Digests are salted by werkzeug and self-describing (method$salt$hash);
whatever logs users in checks them with `werkzeug.security.check_password_hash`.
"""

from werkzeug.security import generate_password_hash


def hash_password(plaintext: str) -> str:
    """Return a salted digest of the plaintext password."""
    return generate_password_hash(plaintext)
