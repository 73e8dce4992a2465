"""Pharmacy inventory table using SQLAlchemy Core."""

from sqlalchemy import Column, DateTime, Integer, Table, Text, func, text

from clinic_api.models.metadata import ADDED_LATER, metadata

inventory = Table(
    "inventory",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("category", Text),
    Column("brand_name", Text),
    Column("generic_name", Text, nullable=False),
    Column("dosage_type", Text),
    Column("strength", Text),
    Column("unit", Text),
    Column("expiration_date", Text),
    # Never negative; every write clamps at 0
    Column("stock", Integer, server_default=text("0"), info=ADDED_LATER),
    Column("description", Text),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
