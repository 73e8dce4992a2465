"""Appointment tables using SQLAlchemy Core."""

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

# Primary appointments table
appointments = Table(
    "appointments",
    metadata,
    Column("id", Integer, primary_key=True),
    # Date and time are stored as the client sent them
    Column("patient", Text, nullable=False),
    Column("date", Text, nullable=False),
    Column("time", Text, nullable=False),
    Column("notes", Text),
    Column("done", Boolean, server_default=text("false")),
    Column("created_by_name", Text, info=ADDED_LATER),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)

# Denormalized mirror read by the scheduling UI, one row per appointment
appointment_mirror = Table(
    "appointment",
    metadata,
    Column("full_name", Text),
    Column("date", Text, info=ADDED_LATER),
    Column("time", Text, info=ADDED_LATER),
    Column("status", Text, info=ADDED_LATER),
    Column("appointment_id", Integer, unique=True, info=ADDED_LATER),
)
