"""Patient record service.

Records are grouped by the exact patient name string. The "latest" record of
a patient is the one with the greatest ``created_at`` (highest id on ties).
Merges for the same patient from concurrent requests are not serialized: two
first-time merges can both insert.
"""

import structlog
from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.models import patient_records
from clinic_api.schemas.patient_records import PatientRecordCreate
from clinic_api.services.merge import replace_if_supplied

logger = structlog.get_logger()

MERGED_FIELDS = ("doctor", "medicine", "dosage", "notes", "date", "time")


class PatientRecordService:
    """Service for patient record entries."""

    @staticmethod
    async def create_record(db: AsyncSession, data: PatientRecordCreate) -> dict:
        """Append a new record for a patient."""
        stmt = (
            insert(patient_records)
            .values(**data.model_dump())
            .returning(patient_records)
        )
        result = await db.execute(stmt)
        record = dict(result.mappings().one())
        await db.commit()
        return record

    @staticmethod
    async def list_all(db: AsyncSession) -> list[dict]:
        """List every record, newest first."""
        query = select(patient_records).order_by(
            patient_records.c.created_at.desc(), patient_records.c.id.desc()
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def list_patients(db: AsyncSession) -> list[dict]:
        """List distinct patients with the time of their latest record."""
        last_ts = func.max(patient_records.c.created_at).label("last_ts")
        query = (
            select(patient_records.c.patient, last_ts)
            .group_by(patient_records.c.patient)
            .order_by(last_ts.desc())
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def latest_record_id(db: AsyncSession, patient: str) -> int | None:
        """Id of the most recent record for an exact patient name."""
        query = (
            select(patient_records.c.id)
            .where(patient_records.c.patient == patient)
            .order_by(patient_records.c.created_at.desc(), patient_records.c.id.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def merge_latest(db: AsyncSession, data: PatientRecordCreate) -> dict:
        """
        Merge fields into the patient's latest record, or start one.

        Supplied fields replace the stored ones and absent fields are kept.

        Args:
            db: Database session
            data: Patient name and the fields to merge

        Returns:
            The updated or inserted record
        """
        record_id = await PatientRecordService.latest_record_id(db, data.patient)

        if record_id is not None:
            c = patient_records.c
            values = {
                field: replace_if_supplied(getattr(data, field), c[field])
                for field in MERGED_FIELDS
            }
            stmt = (
                update(patient_records)
                .where(c.id == record_id)
                .values(**values)
                .returning(patient_records)
            )
            result = await db.execute(stmt)
            row = result.mappings().first()
            if row:
                record = dict(row)
                await db.commit()
                return record
            # Deleted between the lookup and the update; fall through and insert

        record = await PatientRecordService.create_record(db, data)
        logger.info("patient_record_started", patient=data.patient, record_id=record["id"])
        return record
