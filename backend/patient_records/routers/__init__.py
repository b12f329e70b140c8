"""
API Routers for the Patient Records service.
"""
from patient_records.routers.auth import router as auth_router
from patient_records.routers.protected import router as session_router
from patient_records.routers.patients import router as patients_router
from patient_records.routers.notes import router as notes_router

__all__ = [
    "auth_router",
    "session_router",
    "patients_router",
    "notes_router"
]
