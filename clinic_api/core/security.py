"""Password hashing utilities."""

from functools import lru_cache

from passlib.context import CryptContext

from clinic_api.config import settings


@lru_cache
def get_pwd_context(rounds: int | None = None) -> CryptContext:
    """Build the bcrypt context for a cost factor."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds or settings.bcrypt_rounds,
    )


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against a hash."""
    if not hashed_password:
        return False
    try:
        return get_pwd_context().verify(plain_password, hashed_password)
    except ValueError:
        # Malformed or foreign hash stored in the row
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return get_pwd_context().hash(password)
