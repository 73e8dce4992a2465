"""Best-effort propagation from primary tables to their read-side mirrors.

Two pairs are kept in step: ``users`` -> ``profile`` and ``appointments`` ->
``appointment``. Mirror writes always run after the primary write has been
committed, in a separate round trip. A failed mirror write is rolled back,
logged and reported as ``False``; it never changes the outcome of the
primary operation. There is no retry and no cross-request locking.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.models import appointment_mirror, profile
from clinic_api.schemas.common import blank_to_none
from clinic_api.services.merge import replace_if_supplied

logger = structlog.get_logger()


def appointment_status(done: bool | None) -> str:
    """Mirror status string for a completion flag."""
    return "done" if done else "pending"


class MirrorService:
    """Service for mirror table writes."""

    @staticmethod
    async def _rollback(db: AsyncSession) -> None:
        try:
            await db.rollback()
        except Exception as e:
            logger.warning("mirror_rollback_failed", error=str(e))

    @staticmethod
    async def sync_profile(
        db: AsyncSession,
        user_id: int,
        name: str | None,
        email: str | None,
        role: str | None,
        phone: str | None = None,
        address: str | None = None,
        birthdate: str | None = None,
        gender: str | None = None,
    ) -> bool:
        """
        Upsert the profile row for a user after the user was updated.

        Display fields replace the stored ones; phone, address, birthdate and
        gender keep their stored value when absent or blank.

        Returns:
            True if the profile row was written
        """
        name = blank_to_none(name)
        email = blank_to_none(email)
        role = blank_to_none(role)
        optional = {
            "phone": blank_to_none(phone),
            "address": blank_to_none(address),
            "birthdate": blank_to_none(birthdate),
            "gender": blank_to_none(gender),
        }

        try:
            result = await db.execute(select(profile.c.id).where(profile.c.id == user_id))
            exists = result.first() is not None

            if exists:
                values: dict[str, Any] = {
                    "fullname": name,
                    "email": email,
                    "role": role,
                    "last_edited": func.now(),
                }
                for column, value in optional.items():
                    values[column] = replace_if_supplied(value, profile.c[column])
                await db.execute(update(profile).where(profile.c.id == user_id).values(**values))
            else:
                await db.execute(
                    insert(profile).values(
                        id=user_id,
                        fullname=name,
                        email=email,
                        role=role,
                        **optional,
                    )
                )
            await db.commit()
        except Exception as e:
            await MirrorService._rollback(db)
            logger.warning("profile_sync_failed", user_id=user_id, error=str(e))
            return False

        logger.debug("profile_synced", user_id=user_id, created=not exists)
        return True

    @staticmethod
    async def delete_profile(db: AsyncSession, user_id: int) -> bool:
        """Remove the profile row of a deleted user; a missing row is fine."""
        try:
            await db.execute(delete(profile).where(profile.c.id == user_id))
            await db.commit()
        except Exception as e:
            await MirrorService._rollback(db)
            logger.warning("profile_delete_failed", user_id=user_id, error=str(e))
            return False
        return True

    @staticmethod
    async def create_appointment_mirror(db: AsyncSession, appointment: Mapping) -> bool:
        """Insert the mirror row for a newly created appointment."""
        try:
            await db.execute(
                insert(appointment_mirror).values(
                    full_name=appointment["patient"],
                    date=appointment["date"],
                    time=appointment["time"],
                    status=appointment_status(appointment["done"]),
                    appointment_id=appointment["id"],
                )
            )
            await db.commit()
        except Exception as e:
            await MirrorService._rollback(db)
            logger.warning(
                "appointment_mirror_insert_failed",
                appointment_id=appointment["id"],
                error=str(e),
            )
            return False
        return True

    @staticmethod
    async def update_appointment_mirror(db: AsyncSession, appointment: Mapping) -> bool:
        """
        Refresh the mirror row of an updated appointment.

        Status is always recomputed from the post-update ``done`` flag. A
        missing mirror row is left missing.
        """
        mirror = appointment_mirror.c
        try:
            await db.execute(
                update(appointment_mirror)
                .where(mirror.appointment_id == appointment["id"])
                .values(
                    full_name=replace_if_supplied(appointment.get("patient"), mirror.full_name),
                    date=replace_if_supplied(appointment.get("date"), mirror.date),
                    time=replace_if_supplied(appointment.get("time"), mirror.time),
                    status=appointment_status(appointment.get("done")),
                )
            )
            await db.commit()
        except Exception as e:
            await MirrorService._rollback(db)
            logger.warning(
                "appointment_mirror_update_failed",
                appointment_id=appointment["id"],
                error=str(e),
            )
            return False
        return True

    @staticmethod
    async def delete_appointment_mirror(db: AsyncSession, appointment_id: int) -> bool:
        """Delete the mirror row of a deleted appointment; a missing row is fine."""
        try:
            await db.execute(
                delete(appointment_mirror).where(
                    appointment_mirror.c.appointment_id == appointment_id
                )
            )
            await db.commit()
        except Exception as e:
            await MirrorService._rollback(db)
            logger.warning(
                "appointment_mirror_delete_failed",
                appointment_id=appointment_id,
                error=str(e),
            )
            return False
        return True
