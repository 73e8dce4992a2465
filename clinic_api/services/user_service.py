"""User service for business logic."""

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
)
from clinic_api.core.security import get_password_hash, verify_password
from clinic_api.models import profile, users
from clinic_api.schemas.users import (
    ProfileUpdate,
    RegisterRequest,
    UserCreate,
    UserUpdate,
)
from clinic_api.services.merge import replace_if_supplied
from clinic_api.services.mirror_service import MirrorService

logger = structlog.get_logger()

# Column sets returned to callers; password_hash is never among them
USER_SUMMARY = (
    users.c.id,
    users.c.full_name.label("name"),
    users.c.role,
    users.c.email,
    users.c.active,
)
USER_DETAIL = USER_SUMMARY + (
    users.c.phone,
    users.c.address,
    users.c.birthdate,
    users.c.gender,
)
ACCOUNT_COLUMNS = (
    users.c.id,
    users.c.full_name,
    users.c.role,
    users.c.email,
    users.c.active,
    users.c.phone,
    users.c.address,
    users.c.birthdate,
    users.c.gender,
    users.c.created_at,
)
PROFILE_DETAIL = (
    profile.c.id,
    profile.c.fullname.label("name"),
    profile.c.role,
    profile.c.email,
    profile.c.phone,
    profile.c.address,
    profile.c.birthdate,
    profile.c.gender,
)
PROFILE_COLUMNS = PROFILE_DETAIL + (
    profile.c.created_at,
    profile.c.last_edited,
)


class UserService:
    """Service for user accounts and their profiles."""

    @staticmethod
    async def _email_taken(db: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
        query = select(users.c.id).where(users.c.email == email)
        if exclude_id is not None:
            query = query.where(users.c.id != exclude_id)
        result = await db.execute(query)
        return result.first() is not None

    @staticmethod
    async def list_users(db: AsyncSession) -> list[dict]:
        """List users for account management, newest first."""
        result = await db.execute(select(*USER_SUMMARY).order_by(users.c.id.desc()))
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def list_users_legacy(db: AsyncSession) -> list[dict]:
        """List users with their creation time, newest first."""
        query = select(
            users.c.id,
            users.c.full_name,
            users.c.role,
            users.c.email,
            users.c.active,
            users.c.created_at,
        ).order_by(users.c.id.desc())
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> dict:
        """
        Get a user for profile pages.

        The profile mirror is read first; the users row is the fallback for
        users whose profile was never synced.

        Raises:
            NotFoundException: If neither table has the id
        """
        result = await db.execute(
            select(*PROFILE_DETAIL).where(profile.c.id == user_id)
        )
        row = result.mappings().first()
        if row:
            return dict(row)

        result = await db.execute(select(*USER_DETAIL).where(users.c.id == user_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("User not found")
        return dict(row)

    @staticmethod
    async def create_user(db: AsyncSession, data: UserCreate) -> dict:
        """
        Create a user on behalf of an administrator.

        Raises:
            ConflictException: If the email is already registered
        """
        if await UserService._email_taken(db, data.email):
            raise ConflictException("Email already exists")

        query = (
            users.insert()
            .values(
                full_name=data.name,
                role=data.role,
                email=data.email,
                active=data.active,
                password_hash=get_password_hash(data.password),
            )
            .returning(*USER_SUMMARY)
        )
        result = await db.execute(query)
        await db.commit()
        user = dict(result.mappings().one())

        logger.info("user_created", user_id=user["id"], role=user["role"])
        return user

    @staticmethod
    async def register(db: AsyncSession, data: RegisterRequest) -> dict:
        """
        Register a new account.

        Raises:
            ConflictException: If the email is already registered
        """
        if await UserService._email_taken(db, data.email):
            raise ConflictException("Email already registered")

        query = (
            users.insert()
            .values(
                full_name=data.full_name,
                role=data.role,
                email=data.email,
                password_hash=get_password_hash(data.password),
            )
            .returning(*ACCOUNT_COLUMNS)
        )
        result = await db.execute(query)
        await db.commit()
        user = dict(result.mappings().one())

        logger.info("user_registered", user_id=user["id"], role=user["role"])
        return user

    @staticmethod
    async def authenticate(db: AsyncSession, email: str, password: str) -> dict:
        """
        Check credentials and return the user row without its hash.

        Raises:
            UnauthorizedException: If the email is unknown or the password wrong
            ForbiddenException: If the account is disabled
        """
        result = await db.execute(
            select(*ACCOUNT_COLUMNS, users.c.password_hash).where(users.c.email == email)
        )
        row = result.mappings().first()
        if not row:
            raise UnauthorizedException("Invalid credentials")

        user = dict(row)
        password_hash = user.pop("password_hash")

        if user["active"] is False:
            raise ForbiddenException("Account is disabled. Contact an administrator.")
        if not verify_password(password, password_hash):
            raise UnauthorizedException("Invalid credentials")

        logger.info("user_logged_in", user_id=user["id"])
        return user

    @staticmethod
    async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> dict:
        """
        Update a user, then mirror the change into the profile table.

        The profile sync is best effort; its failure is logged and the user
        update is still returned.

        Raises:
            ConflictException: If another user owns the new email
            NotFoundException: If the user does not exist
        """
        if await UserService._email_taken(db, data.email, exclude_id=user_id):
            raise ConflictException("Email already exists")

        c = users.c
        values = {
            "full_name": data.name,
            "email": data.email,
            "role": data.role,
            "active": replace_if_supplied(data.active, c.active),
            "phone": replace_if_supplied(data.phone, c.phone),
            "address": replace_if_supplied(data.address, c.address),
            "birthdate": replace_if_supplied(data.birthdate, c.birthdate),
            "gender": replace_if_supplied(data.gender, c.gender),
        }
        if data.password:
            values["password_hash"] = get_password_hash(data.password)

        query = update(users).where(c.id == user_id).values(**values).returning(*USER_DETAIL)
        result = await db.execute(query)
        row = result.mappings().first()
        if not row:
            await db.rollback()
            raise NotFoundException("User not found")
        user = dict(row)
        await db.commit()

        await MirrorService.sync_profile(
            db,
            user_id,
            name=data.name,
            email=data.email,
            role=data.role,
            phone=data.phone,
            address=data.address,
            birthdate=data.birthdate,
            gender=data.gender,
        )
        return user

    @staticmethod
    async def set_active(db: AsyncSession, user_id: int, active: bool) -> dict:
        """Enable or disable an account."""
        query = (
            update(users)
            .where(users.c.id == user_id)
            .values(active=active)
            .returning(*USER_SUMMARY)
        )
        result = await db.execute(query)
        row = result.mappings().first()
        if not row:
            await db.rollback()
            raise NotFoundException("User not found")
        await db.commit()

        logger.info("user_active_changed", user_id=user_id, active=active)
        return dict(row)

    @staticmethod
    async def delete_user(db: AsyncSession, user_id: int) -> None:
        """
        Hard delete a user and, best effort, its profile row.

        Raises:
            NotFoundException: If the user does not exist
        """
        result = await db.execute(delete(users).where(users.c.id == user_id))
        await db.commit()
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise NotFoundException("User not found")

        await MirrorService.delete_profile(db, user_id)
        logger.info("user_deleted", user_id=user_id)

    @staticmethod
    async def get_profile(db: AsyncSession, user_id: int) -> dict:
        """Get a profile row by user id."""
        result = await db.execute(select(*PROFILE_COLUMNS).where(profile.c.id == user_id))
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Profile not found")
        return dict(row)

    @staticmethod
    async def update_profile(db: AsyncSession, user_id: int, data: ProfileUpdate) -> dict:
        """
        Edit a profile row directly.

        Every field keeps its stored value when absent or blank.
        """
        c = profile.c
        query = (
            update(profile)
            .where(c.id == user_id)
            .values(
                fullname=replace_if_supplied(data.name, c.fullname),
                email=replace_if_supplied(data.email, c.email),
                role=replace_if_supplied(data.role, c.role),
                phone=replace_if_supplied(data.phone, c.phone),
                address=replace_if_supplied(data.address, c.address),
                birthdate=replace_if_supplied(data.birthdate, c.birthdate),
                gender=replace_if_supplied(data.gender, c.gender),
                last_edited=func.now(),
            )
            .returning(*PROFILE_COLUMNS)
        )
        result = await db.execute(query)
        row = result.mappings().first()
        if not row:
            await db.rollback()
            raise NotFoundException("Profile not found")
        await db.commit()
        return dict(row)
