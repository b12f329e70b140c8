"""
Services for the Patient Records service.
"""
from patient_records.services.auth_service import AuthService
from patient_records.services.patient_service import PatientService
from patient_records.services.note_service import NoteService

__all__ = [
    "AuthService",
    "PatientService",
    "NoteService"
]
