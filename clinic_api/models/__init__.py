"""Database models."""

from clinic_api.models.appointments import appointment_mirror, appointments
from clinic_api.models.inventory import inventory
from clinic_api.models.metadata import metadata
from clinic_api.models.patient_records import patient_records
from clinic_api.models.profile import profile
from clinic_api.models.users import users

__all__ = [
    "appointment_mirror",
    "appointments",
    "inventory",
    "metadata",
    "patient_records",
    "profile",
    "users",
]
