"""User table model using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    Table,
    Text,
    func,
    text,
)

from clinic_api.models.metadata import ADDED_LATER, metadata

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("full_name", Text),
    # Free text; several users may share a role
    Column("role", Text),
    Column("email", Text, unique=True),
    Column("password_hash", Text, info=ADDED_LATER),
    # Account state
    Column("active", Boolean, server_default=text("true"), info=ADDED_LATER),
    # Optional profile fields
    Column("phone", Text, info=ADDED_LATER),
    Column("address", Text, info=ADDED_LATER),
    Column("birthdate", Text, info=ADDED_LATER),
    Column("gender", Text, info=ADDED_LATER),
    # Audit
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
