"""Patient record schemas."""

from datetime import datetime

from pydantic import BaseModel

from clinic_api.schemas.common import OptionalText, RequiredText


class PatientRecordCreate(BaseModel):
    """Schema for appending a record, also used to merge into the latest one."""

    patient: RequiredText
    date: OptionalText = None
    time: OptionalText = None
    notes: OptionalText = None
    doctor: OptionalText = None
    medicine: OptionalText = None
    dosage: OptionalText = None


class PatientRecordResponse(BaseModel):
    """Schema for a stored record."""

    id: int
    patient: str
    date: str | None = None
    time: str | None = None
    notes: str | None = None
    doctor: str | None = None
    medicine: str | None = None
    dosage: str | None = None
    created_at: datetime | None = None


class PatientSummary(BaseModel):
    """Patient name with the timestamp of their latest record."""

    patient: str
    last_ts: datetime | None = None
