"""Shared field types for request validation."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field


def blank_to_none(value: Any) -> Any:
    """Strip strings and turn empty ones into ``None``."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def strip_text(value: Any) -> Any:
    """Strip surrounding whitespace from strings."""
    if isinstance(value, str):
        return value.strip()
    return value


def normalize_email(value: Any) -> Any:
    """Lowercase and strip an email address."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


# Absent, null and "" all mean "not supplied"
OptionalText = Annotated[str | None, BeforeValidator(blank_to_none)]

# Must contain something other than whitespace
RequiredText = Annotated[str, BeforeValidator(strip_text), Field(min_length=1)]

Email = Annotated[str, BeforeValidator(normalize_email), Field(min_length=3, max_length=320)]


def bool_or_none(value: Any) -> bool | None:
    """Keep real booleans only; anything else means "not supplied"."""
    return value if isinstance(value, bool) else None


# Update flags: non-boolean input leaves the stored value alone
OptionalFlag = Annotated[bool | None, BeforeValidator(bool_or_none)]
