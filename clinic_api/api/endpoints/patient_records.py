"""Patient record endpoints."""

from fastapi import APIRouter, status

from clinic_api.dependencies import DatabaseSession
from clinic_api.schemas.patient_records import (
    PatientRecordCreate,
    PatientRecordResponse,
    PatientSummary,
)
from clinic_api.services.patient_record_service import PatientRecordService

router = APIRouter(prefix="/patient-records", tags=["patient-records"])


@router.get("/all", response_model=list[PatientRecordResponse])
async def list_all_records(db: DatabaseSession):
    """Return every record for reporting."""
    return await PatientRecordService.list_all(db)


@router.put("/latest", response_model=PatientRecordResponse)
async def merge_latest_record(data: PatientRecordCreate, db: DatabaseSession):
    """Merge into the patient's latest record instead of adding a duplicate."""
    return await PatientRecordService.merge_latest(db, data)


@router.post("", response_model=PatientRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(data: PatientRecordCreate, db: DatabaseSession):
    """Add a record entry."""
    return await PatientRecordService.create_record(db, data)


@router.get("", response_model=list[PatientSummary])
async def list_patients(db: DatabaseSession):
    """List distinct patients with their latest record time."""
    return await PatientRecordService.list_patients(db)
