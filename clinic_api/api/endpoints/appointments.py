"""Doctor appointment endpoints."""

from fastapi import APIRouter, status

from clinic_api.dependencies import DatabaseSession
from clinic_api.schemas.appointments import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
)
from clinic_api.services.appointment_service import AppointmentService

router = APIRouter()


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(data: AppointmentCreate, db: DatabaseSession):
    """
    Create a new appointment.

    Args:
        data: Appointment details
        db: Database session

    Returns:
        Created appointment
    """
    service = AppointmentService(db)
    return await service.create_appointment(data)


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(db: DatabaseSession):
    """List appointments, newest first."""
    service = AppointmentService(db)
    return await service.list_appointments()


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(appointment_id: int, data: AppointmentUpdate, db: DatabaseSession):
    """
    Update an appointment.

    Args:
        appointment_id: Appointment ID
        data: Fields to change
        db: Database session

    Returns:
        Updated appointment
    """
    service = AppointmentService(db)
    return await service.update_appointment(appointment_id, data)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(appointment_id: int, db: DatabaseSession) -> None:
    """Delete an appointment."""
    service = AppointmentService(db)
    await service.delete_appointment(appointment_id)
