"""Appointment schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from clinic_api.schemas.common import OptionalFlag, OptionalText, RequiredText


class AppointmentCreate(BaseModel):
    """Schema for creating an appointment."""

    model_config = ConfigDict(populate_by_name=True)

    patient: RequiredText
    date: RequiredText
    time: RequiredText
    notes: OptionalText = None
    done: bool = False
    created_by_name: OptionalText = Field(None, alias="createdByName")


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment; absent fields are kept."""

    model_config = ConfigDict(populate_by_name=True)

    patient: OptionalText = None
    date: OptionalText = None
    time: OptionalText = None
    notes: OptionalText = None
    done: OptionalFlag = None
    created_by_name: OptionalText = Field(None, alias="createdByName")


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: int
    patient: str
    date: str
    time: str
    notes: str | None = None
    done: bool | None = None
    created_by_name: str | None = None
    created_at: datetime | None = None
