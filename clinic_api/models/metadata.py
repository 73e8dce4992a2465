"""Shared metadata for every table the application owns."""

from sqlalchemy import MetaData

metadata = MetaData()

# Column.info marker for columns that older deployments may lack.
ADDED_LATER = {"added_later": True}
