"""Tests for patient record endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.models import patient_records


async def record_count(db_session: AsyncSession, patient: str) -> int:
    result = await db_session.execute(
        select(func.count())
        .select_from(patient_records)
        .where(patient_records.c.patient == patient)
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_record(client: AsyncClient) -> None:
    """Test adding a record entry."""
    response = await client.post(
        "/api/patient-records",
        json={"patient": "Jane Doe", "date": "2024-01-01", "notes": "Annual check"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["patient"] == "Jane Doe"
    assert data["notes"] == "Annual check"
    assert data["doctor"] is None


@pytest.mark.asyncio
async def test_create_record_requires_patient(client: AsyncClient) -> None:
    """Test that a blank patient name is rejected."""
    response = await client.post("/api/patient-records", json={"patient": "   "})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_merge_latest_starts_and_fills_one_record(
    client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Successive merges build up a single record."""
    first = await client.put(
        "/api/patient-records/latest", json={"patient": "Jane Doe", "doctor": "Dr. Smith"}
    )
    assert first.status_code == 200

    second = await client.put(
        "/api/patient-records/latest",
        json={"patient": "Jane Doe", "medicine": "Amoxicillin", "doctor": ""},
    )
    assert second.status_code == 200
    data = second.json()
    assert data["id"] == first.json()["id"]
    assert data["doctor"] == "Dr. Smith"
    assert data["medicine"] == "Amoxicillin"

    assert await record_count(db_session, "Jane Doe") == 1


@pytest.mark.asyncio
async def test_merge_latest_updates_most_recent_record(
    client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Only the newest record of the patient is touched."""
    older = await client.post("/api/patient-records", json={"patient": "Jane Doe", "notes": "old"})
    newer = await client.post("/api/patient-records", json={"patient": "Jane Doe", "notes": "new"})

    response = await client.put(
        "/api/patient-records/latest", json={"patient": "Jane Doe", "dosage": "500mg"}
    )
    data = response.json()
    assert data["id"] == newer.json()["id"]
    assert data["notes"] == "new"
    assert data["dosage"] == "500mg"

    result = await db_session.execute(
        select(patient_records.c.dosage).where(patient_records.c.id == older.json()["id"])
    )
    assert result.scalar_one() is None
    assert await record_count(db_session, "Jane Doe") == 2


@pytest.mark.asyncio
async def test_merge_latest_matches_exact_name(
    client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Names differing in case are different patients."""
    await client.put("/api/patient-records/latest", json={"patient": "Jane Doe", "doctor": "A"})
    await client.put("/api/patient-records/latest", json={"patient": "jane doe", "doctor": "B"})

    assert await record_count(db_session, "Jane Doe") == 1
    assert await record_count(db_session, "jane doe") == 1


@pytest.mark.asyncio
async def test_list_patients(client: AsyncClient) -> None:
    """Each patient is listed once with the time of the latest record."""
    for patient in ("Jane Doe", "John Roe", "Jane Doe"):
        await client.post("/api/patient-records", json={"patient": patient})

    response = await client.get("/api/patient-records")
    assert response.status_code == 200
    data = response.json()
    assert sorted(entry["patient"] for entry in data) == ["Jane Doe", "John Roe"]
    assert all(entry["last_ts"] is not None for entry in data)


@pytest.mark.asyncio
async def test_list_all_records(client: AsyncClient) -> None:
    """Test listing every record."""
    for patient in ("Jane Doe", "John Roe", "Jane Doe"):
        await client.post("/api/patient-records", json={"patient": patient})

    response = await client.get("/api/patient-records/all")
    assert response.status_code == 200
    assert len(response.json()) == 3
