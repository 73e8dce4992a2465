"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.database import Database, get_database, get_db

# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
DatabaseHandle = Annotated[Database, Depends(get_database)]
