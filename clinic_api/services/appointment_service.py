"""Appointment service for business logic."""

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.exceptions import NotFoundException
from clinic_api.models import appointments
from clinic_api.schemas.appointments import AppointmentCreate, AppointmentUpdate
from clinic_api.services.merge import replace_if_supplied
from clinic_api.services.mirror_service import MirrorService

logger = structlog.get_logger()


class AppointmentService:
    """Service for managing appointments and their mirror rows."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_appointment(self, data: AppointmentCreate) -> dict:
        """
        Create a new appointment.

        The mirror row is written afterwards; if that fails the appointment
        is still reported as created.

        Args:
            data: Appointment creation data

        Returns:
            Created appointment
        """
        stmt = (
            insert(appointments)
            .values(
                patient=data.patient,
                date=data.date,
                time=data.time,
                notes=data.notes,
                done=data.done,
                created_by_name=data.created_by_name,
            )
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        appointment = dict(result.mappings().one())
        await self.db.commit()

        await MirrorService.create_appointment_mirror(self.db, appointment)

        logger.info("appointment_created", appointment_id=appointment["id"])
        return appointment

    async def list_appointments(self) -> list[dict]:
        """List all appointments, newest first."""
        result = await self.db.execute(select(appointments).order_by(appointments.c.id.desc()))
        return [dict(row) for row in result.mappings().all()]

    async def update_appointment(self, appointment_id: int, data: AppointmentUpdate) -> dict:
        """
        Update an appointment and refresh its mirror row.

        Args:
            appointment_id: Appointment ID
            data: Fields to replace; absent ones are kept

        Returns:
            Updated appointment

        Raises:
            NotFoundException: If appointment not found
        """
        c = appointments.c
        stmt = (
            update(appointments)
            .where(c.id == appointment_id)
            .values(
                patient=replace_if_supplied(data.patient, c.patient),
                date=replace_if_supplied(data.date, c.date),
                time=replace_if_supplied(data.time, c.time),
                notes=replace_if_supplied(data.notes, c.notes),
                done=replace_if_supplied(data.done, c.done),
                created_by_name=replace_if_supplied(data.created_by_name, c.created_by_name),
            )
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        if not row:
            await self.db.rollback()
            raise NotFoundException("Appointment not found")
        appointment = dict(row)
        await self.db.commit()

        await MirrorService.update_appointment_mirror(self.db, appointment)
        return appointment

    async def delete_appointment(self, appointment_id: int) -> None:
        """
        Hard delete an appointment and then its mirror row.

        Raises:
            NotFoundException: If appointment not found
        """
        stmt = delete(appointments).where(appointments.c.id == appointment_id)
        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise NotFoundException("Appointment not found")

        await MirrorService.delete_appointment_mirror(self.db, appointment_id)
        logger.info("appointment_deleted", appointment_id=appointment_id)
