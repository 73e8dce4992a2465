"""Tests for password hashing."""

from clinic_api.config import settings
from clinic_api.core.security import get_password_hash, get_pwd_context, verify_password


def test_password_hashing():
    """Test hashing and verifying passwords."""
    hashed = get_password_hash("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("wrong", hashed)


def test_hash_uses_configured_cost():
    """The bcrypt cost factor comes from settings."""
    hashed = get_password_hash("hunter22")
    assert hashed.split("$")[2] == f"{settings.bcrypt_rounds:02d}"
    assert get_pwd_context() is get_pwd_context()


def test_verify_password_without_hash():
    """Users created before passwords existed cannot log in."""
    assert not verify_password("anything", None)
    assert not verify_password("anything", "")
    assert not verify_password("anything", "not-a-bcrypt-hash")
