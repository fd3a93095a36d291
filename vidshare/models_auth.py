import re
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from vidshare.models import db

# Argon2id password hasher (recommended by OWASP)
# Using secure defaults: time_cost=3, memory_cost=65536, parallelism=4
ph = PasswordHasher()

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class User(db.Model):
    __tablename__ = "users"
    __bind_key__ = "auth"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column("password", db.String(255), nullable=False)


def hash_password(password: str) -> str:
    """Hash password using Argon2id (OWASP recommended)."""
    return ph.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Verify password against stored hash.

    Hashes written by another scheme (e.g. bcrypt rows from an older
    deployment) cannot be verified and count as a mismatch.
    """
    try:
        ph.verify(password_hash, password)
        return True
    except (VerificationError, InvalidHashError):
        return False


def validate_registration(name: str, email: str, password: str) -> tuple[bool, list[str]]:
    """Validate registration fields."""
    errors = []

    if not name or not email or not password:
        errors.append("Missing fields")
        return False, errors

    if len(name) > 120:
        errors.append("Name must be at most 120 characters long")

    if len(email) > 255 or not EMAIL_PATTERN.match(email):
        errors.append("Invalid email address")

    return len(errors) == 0, errors
