"""
Clinical note models.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date


class NoteCreate(BaseModel):
    """Model for creating a note attached to a patient."""
    patient_id: str
    note_text: str = Field(..., min_length=1)
    note_date: date


class NoteUpdate(BaseModel):
    """Notes only ever change their text."""
    note_text: str = Field(..., min_length=1)


class Note(BaseModel):
    """Note row as stored in the patient_notes table."""
    id: str
    patient_id: str
    note_text: str
    note_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True
