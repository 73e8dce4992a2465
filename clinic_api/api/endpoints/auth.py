"""Registration and login endpoints.

Login answers with the stored user row; no session token is issued.
"""

from fastapi import APIRouter

from clinic_api.dependencies import DatabaseSession
from clinic_api.schemas.users import AccountResponse, LoginRequest, RegisterRequest
from clinic_api.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=AccountResponse)
async def register(data: RegisterRequest, db: DatabaseSession):
    """Register a new account."""
    user = await UserService.register(db, data)
    return AccountResponse(user=user)


@router.post("/login", response_model=AccountResponse)
async def login(data: LoginRequest, db: DatabaseSession):
    """Check credentials and return the account."""
    user = await UserService.authenticate(db, data.email, data.password)
    return AccountResponse(user=user)
