"""Patient record table using SQLAlchemy Core."""

from sqlalchemy import Column, DateTime, Integer, Table, Text, func

from clinic_api.models.metadata import ADDED_LATER, metadata

patient_records = Table(
    "patient_records",
    metadata,
    Column("id", Integer, primary_key=True),
    # Records are grouped by exact patient name
    Column("patient", Text, nullable=False),
    Column("date", Text),
    Column("time", Text),
    Column("notes", Text),
    Column("doctor", Text, info=ADDED_LATER),
    Column("medicine", Text, info=ADDED_LATER),
    Column("dosage", Text, info=ADDED_LATER),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
