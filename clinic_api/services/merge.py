"""Column merge helpers shared by the services."""

from typing import Any

from sqlalchemy import ColumnElement


def replace_if_supplied(value: Any, column: ColumnElement) -> Any:
    """UPDATE value that keeps the stored one when nothing was supplied."""
    return column if value is None else value


def clamp_at_zero(value: int) -> int:
    """Floor a stock count at zero."""
    return max(0, value)
