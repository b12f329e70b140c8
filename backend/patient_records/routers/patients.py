"""
Patient management routes.
"""
from typing import List
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.database import get_db
from patient_records.models.patient import Patient, PatientFormData, PatientSearchFilters
from patient_records.models.note import Note
from patient_records.models.user import SessionContext
from patient_records.routers.protected import require_session, unwrap
from patient_records.services.patient_service import PatientService
from patient_records.services.note_service import NoteService

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("/", response_model=List[Patient])
async def search_patients(
    filters: PatientSearchFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Search live patients; every filter is optional."""
    return unwrap(await PatientService.search(db, filters))


@router.get("/recent", response_model=List[Patient])
async def recent_patients(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Recently updated patients."""
    return unwrap(await PatientService.get_recent(db, limit))


@router.get("/exists")
async def patient_exists(
    national_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Duplicate check by national ID."""
    return {"exists": unwrap(await PatientService.exists_by_national_id(db, national_id))}


@router.post("/", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_data: PatientFormData,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Create a new patient record."""
    return unwrap(await PatientService.create(db, patient_data, context.user))


@router.get("/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Get a specific patient by ID."""
    return unwrap(await PatientService.get_by_id(db, patient_id), not_found="Patient not found")


@router.put("/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: str,
    patient_data: PatientFormData,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Replace a patient's details."""
    return unwrap(await PatientService.update(db, patient_id, patient_data))


@router.delete("/{patient_id}", response_model=Patient)
async def delete_patient(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Soft delete a patient."""
    return unwrap(await PatientService.soft_delete(db, patient_id, context.user))


@router.get("/{patient_id}/notes", response_model=List[Note])
async def list_patient_notes(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    """Notes for a patient, newest first."""
    return unwrap(await NoteService.get_by_patient_id(db, patient_id))
