"""
Patient models for patient data management.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime, date
from enum import Enum


class Gender(str, Enum):
    """Patient gender."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PatientFormData(BaseModel):
    """Mutable patient fields, used for both create and full-payload update."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date
    national_id: Optional[str] = Field(None, max_length=50)
    gender: Optional[Gender] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    postal_code: Optional[str] = Field(None, max_length=20)
    occupation: Optional[str] = None
    hobby: Optional[str] = None

    class Config:
        use_enum_values = True


class PatientSearchFilters(BaseModel):
    """Optional search criteria; an empty field places no constraint."""
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    patient_number: Optional[int] = None
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = None


class Patient(BaseModel):
    """Patient row as stored in the patients table."""
    id: str
    patient_number: int
    first_name: str
    last_name: str
    date_of_birth: date
    national_id: Optional[str] = None
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    occupation: Optional[str] = None
    hobby: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
    created_by: str

    class Config:
        from_attributes = True
