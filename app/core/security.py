"""Password hashing (bcrypt via passlib)."""

from functools import lru_cache

from passlib.context import CryptContext

from app.core.constants import MAX_PASSWORD_BYTES

BCRYPT_ROUNDS = 12

password_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def password_problem(plain: str) -> str | None:
    """Reason bcrypt cannot hash ``plain`` faithfully, or None."""
    if "\x00" in plain:
        return "must not contain NUL characters"
    if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"must be at most {MAX_PASSWORD_BYTES} bytes"
    return None


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Password must not be empty")
    problem = password_problem(plain)
    if problem:
        raise ValueError(f"Password {problem}")
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """False on mismatch, on a missing hash and on a hash passlib cannot parse."""
    if not plain or not hashed:
        return False
    try:
        return password_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    return password_context.hash("not-a-real-password")


def verify_password_dummy(plain: str) -> bool:
    """Spend one verification's worth of time for logins against unknown accounts."""
    try:
        password_context.verify(plain or "-", _dummy_hash())
    except (ValueError, TypeError):
        pass
    return False
