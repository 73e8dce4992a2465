"""User management and profile endpoints."""

from fastapi import APIRouter, status

from clinic_api.dependencies import DatabaseSession
from clinic_api.schemas.users import (
    LegacyUserResponse,
    ProfileResponse,
    ProfileUpdate,
    UserActiveUpdate,
    UserCreate,
    UserDetailResponse,
    UserResponse,
    UserUpdate,
)
from clinic_api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
profile_router = APIRouter(prefix="/profile", tags=["profile"])

# Mounted without the API prefix for older clients
legacy_router = APIRouter(tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(db: DatabaseSession):
    """List users, newest first."""
    return await UserService.list_users(db)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, db: DatabaseSession):
    """Create a user."""
    return await UserService.create_user(db, data)


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(user_id: int, db: DatabaseSession):
    """Get a user, preferring the synced profile row."""
    return await UserService.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserDetailResponse)
async def update_user(user_id: int, data: UserUpdate, db: DatabaseSession):
    """Update a user and sync its profile."""
    return await UserService.update_user(db, user_id, data)


@router.patch("/{user_id}/active", response_model=UserResponse)
async def set_user_active(user_id: int, data: UserActiveUpdate, db: DatabaseSession):
    """Enable or disable an account."""
    return await UserService.set_active(db, user_id, data.active)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: DatabaseSession) -> None:
    """Delete a user."""
    await UserService.delete_user(db, user_id)


@profile_router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: int, db: DatabaseSession):
    """Get a profile row."""
    return await UserService.get_profile(db, user_id)


@profile_router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(user_id: int, data: ProfileUpdate, db: DatabaseSession):
    """Edit a profile row; blank fields keep their value."""
    return await UserService.update_profile(db, user_id, data)


@legacy_router.get("/users", response_model=list[LegacyUserResponse])
async def list_users_legacy(db: DatabaseSession):
    """List users with their creation time."""
    return await UserService.list_users_legacy(db)
