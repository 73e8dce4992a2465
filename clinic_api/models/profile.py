"""Profile table model using SQLAlchemy Core.

Read-side mirror of a user's display fields. Rows share the user's id but
there is no foreign key; the mirror service keeps them in step.
"""

from sqlalchemy import Column, DateTime, Integer, Table, Text, func

from clinic_api.models.metadata import metadata

profile = Table(
    "profile",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("fullname", Text),
    Column("role", Text),
    Column("email", Text),
    Column("phone", Text),
    Column("address", Text),
    Column("gender", Text),
    Column("birthdate", Text),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("last_edited", DateTime(timezone=True), server_default=func.now()),
)
