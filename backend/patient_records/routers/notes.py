"""
Clinical note routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.database import get_db
from patient_records.models.note import Note, NoteCreate, NoteUpdate
from patient_records.models.user import SessionContext
from patient_records.routers.protected import require_session, unwrap
from patient_records.services.note_service import NoteService

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.post("/", response_model=Note, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    return unwrap(await NoteService.create(db, note_data))


@router.put("/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    note_data: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    return unwrap(await NoteService.update(db, note_id, note_data))


@router.delete("/{note_id}", response_model=Note)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(require_session)
):
    return unwrap(await NoteService.soft_delete(db, note_id))
