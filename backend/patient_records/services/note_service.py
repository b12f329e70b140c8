"""
Note service - clinical notes attached to a patient.
"""
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.database import NoteRecord
from patient_records.models.note import Note, NoteCreate, NoteUpdate
from patient_records.models.result import ServiceResult, driver_message

logger = logging.getLogger(__name__)


class NoteService:
    """Data access for the patient_notes table."""

    @staticmethod
    async def get_by_patient_id(db: AsyncSession, patient_id: str) -> ServiceResult[List[Note]]:
        """Live notes for a patient, newest note_date first."""
        try:
            result = await db.execute(
                select(NoteRecord)
                .where(NoteRecord.patient_id == patient_id, NoteRecord.deleted_at.is_(None))
                .order_by(NoteRecord.note_date.desc())
            )
            return ServiceResult.ok([Note.model_validate(n) for n in result.scalars().all()])

        except SQLAlchemyError as e:
            logger.error(f"Error fetching notes for patient {patient_id}: {e}")
            return ServiceResult.fail(f"Failed to fetch notes: {driver_message(e)}")
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            return ServiceResult.fail("An unexpected error occurred while fetching notes")

    @staticmethod
    async def create(db: AsyncSession, note_data: NoteCreate) -> ServiceResult[Note]:
        """Create a new note."""
        try:
            db_note = NoteRecord(**note_data.model_dump())

            db.add(db_note)
            await db.commit()
            await db.refresh(db_note)

            return ServiceResult.ok(Note.model_validate(db_note))

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating note: {e}")
            return ServiceResult.fail(f"Failed to create note: {driver_message(e)}")
        except Exception as e:
            await db.rollback()
            logger.error(f"Unexpected error: {e}")
            return ServiceResult.fail("An unexpected error occurred while creating note")

    @staticmethod
    async def update(db: AsyncSession, note_id: str, note_data: NoteUpdate) -> ServiceResult[Note]:
        """Update the text of a live note."""
        try:
            result = await db.execute(
                update(NoteRecord)
                .where(NoteRecord.id == note_id, NoteRecord.deleted_at.is_(None))
                .values(note_text=note_data.note_text)
                .returning(NoteRecord)
                .execution_options(populate_existing=True)
            )
            db_note = result.scalar_one_or_none()

            if db_note is None:
                await db.rollback()
                return ServiceResult.fail("Note not found")

            note = Note.model_validate(db_note)
            await db.commit()

            return ServiceResult.ok(note)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error updating note {note_id}: {e}")
            return ServiceResult.fail(f"Failed to update note: {driver_message(e)}")
        except Exception as e:
            await db.rollback()
            logger.error(f"Unexpected error: {e}")
            return ServiceResult.fail("An unexpected error occurred while updating note")

    @staticmethod
    async def soft_delete(db: AsyncSession, note_id: str) -> ServiceResult[Note]:
        """Soft delete a live note by stamping deleted_at."""
        try:
            result = await db.execute(
                update(NoteRecord)
                .where(NoteRecord.id == note_id, NoteRecord.deleted_at.is_(None))
                .values(deleted_at=datetime.now(timezone.utc))
                .returning(NoteRecord)
                .execution_options(populate_existing=True)
            )
            db_note = result.scalar_one_or_none()

            if db_note is None:
                await db.rollback()
                return ServiceResult.fail("Note not found or already deleted")

            note = Note.model_validate(db_note)
            await db.commit()

            return ServiceResult.ok(note)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error deleting note {note_id}: {e}")
            return ServiceResult.fail(f"Failed to delete note: {driver_message(e)}")
        except Exception as e:
            await db.rollback()
            logger.error(f"Unexpected error: {e}")
            return ServiceResult.fail("An unexpected error occurred while deleting note")
