"""
Pydantic models for the Patient Records service.
"""
from patient_records.models.result import ServiceResult
from patient_records.models.user import User, UserCreate, UserResponse, UserRole, Token, AuthSession, SessionContext
from patient_records.models.patient import Patient, PatientFormData, PatientSearchFilters, Gender
from patient_records.models.note import Note, NoteCreate, NoteUpdate

__all__ = [
    "ServiceResult",
    "User", "UserCreate", "UserResponse", "UserRole", "Token", "AuthSession", "SessionContext",
    "Patient", "PatientFormData", "PatientSearchFilters", "Gender",
    "Note", "NoteCreate", "NoteUpdate"
]
