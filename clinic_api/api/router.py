"""API router configuration."""

from fastapi import APIRouter

from clinic_api.api.endpoints import (
    appointments,
    auth,
    health,
    inventory,
    patient_records,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(users.profile_router, tags=["Users"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(inventory.router, tags=["Inventory"])
api_router.include_router(patient_records.router, tags=["Patient Records"])
