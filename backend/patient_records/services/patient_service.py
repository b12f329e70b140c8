"""
Patient service - handles all patient-related database operations.

Every operation issues one statement on the caller's session and returns a
ServiceResult instead of raising. Soft-deleted patients (deleted_at set) are
never returned by the read paths.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.database import PatientRecord, next_patient_number
from patient_records.models.patient import Patient, PatientFormData, PatientSearchFilters
from patient_records.models.result import ServiceResult, driver_message
from patient_records.models.user import User

logger = logging.getLogger(__name__)


class PatientService:
    """Data access for the patients table."""

    @staticmethod
    async def search(db: AsyncSession, filters: PatientSearchFilters) -> ServiceResult[List[Patient]]:
        """
        Search patients with optional filters.

        Identifiers and dates match exactly, names and phone numbers match
        as case-insensitive substrings. Results are ordered by last name.
        """
        try:
            query = select(PatientRecord).where(PatientRecord.deleted_at.is_(None))

            if filters.patient_number:
                query = query.where(PatientRecord.patient_number == filters.patient_number)

            if filters.last_name:
                query = query.where(PatientRecord.last_name.ilike(f"%{filters.last_name}%"))

            if filters.first_name:
                query = query.where(PatientRecord.first_name.ilike(f"%{filters.first_name}%"))

            if filters.date_of_birth:
                query = query.where(PatientRecord.date_of_birth == filters.date_of_birth)

            if filters.phone_number:
                query = query.where(PatientRecord.phone_number.ilike(f"%{filters.phone_number}%"))

            query = query.order_by(PatientRecord.last_name.asc())

            result = await db.execute(query)
            patients = [Patient.model_validate(p) for p in result.scalars().all()]
            return ServiceResult.ok(patients)

        except SQLAlchemyError as e:
            logger.error(f"Patient search error: {e}")
            return ServiceResult.fail(f"Failed to search patients: {driver_message(e)}")
        except Exception as e:
            logger.error(f"Unexpected error in patient search: {e}")
            return ServiceResult.fail("An unexpected error occurred while searching patients")

    @staticmethod
    async def get_by_id(db: AsyncSession, patient_id: str) -> ServiceResult[Optional[Patient]]:
        """Get a single patient by ID. Data is None if missing or deleted."""
        try:
            result = await db.execute(
                select(PatientRecord).where(
                    PatientRecord.id == patient_id,
                    PatientRecord.deleted_at.is_(None)
                )
            )
            return ServiceResult.ok(Patient.model_validate(result.scalar_one()))

        except NoResultFound:
            return ServiceResult.ok(None)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching patient {patient_id}: {e}")
            return ServiceResult.fail(f"Failed to load patient: {driver_message(e)}")
        except Exception as e:
            logger.error(f"Unexpected error loading patient {patient_id}: {e}")
            return ServiceResult.fail("An unexpected error occurred while loading patient")

    @staticmethod
    async def create(
        db: AsyncSession,
        patient_data: PatientFormData,
        current_user: Optional[User]
    ) -> ServiceResult[Patient]:
        """Create a new patient, stamping created_by with the acting user."""
        if current_user is None:
            return ServiceResult.fail("You must be logged in to create a patient")

        try:
            db_patient = PatientRecord(
                **patient_data.model_dump(),
                patient_number=next_patient_number(),
                created_by=current_user.id
            )

            db.add(db_patient)
            await db.commit()
            await db.refresh(db_patient)

            logger.info(f"Patient {db_patient.id} created by {current_user.id}")
            return ServiceResult.ok(Patient.model_validate(db_patient))

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error creating patient: {e}")
            return ServiceResult.fail(f"Failed to create patient: {driver_message(e)}")
        except Exception as e:
            await db.rollback()
            logger.error(f"Unexpected error creating patient: {e}")
            return ServiceResult.fail("An unexpected error occurred while creating patient")

    @staticmethod
    async def update(
        db: AsyncSession,
        patient_id: str,
        patient_data: PatientFormData
    ) -> ServiceResult[Patient]:
        """
        Replace every mutable field of a live patient and refresh updated_at.

        A patient that is missing or deleted fails through the driver path
        like any other database error.
        """
        try:
            result = await db.execute(
                update(PatientRecord)
                .where(PatientRecord.id == patient_id, PatientRecord.deleted_at.is_(None))
                .values(**patient_data.model_dump(), updated_at=datetime.now(timezone.utc))
                .returning(PatientRecord)
                .execution_options(populate_existing=True)
            )
            patient = Patient.model_validate(result.scalar_one())
            await db.commit()

            return ServiceResult.ok(patient)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error updating patient {patient_id}: {e}")
            return ServiceResult.fail(f"Failed to update patient: {driver_message(e)}")
        except Exception as e:
            await db.rollback()
            logger.error(f"Unexpected error updating patient {patient_id}: {e}")
            return ServiceResult.fail("An unexpected error occurred while updating patient")

    @staticmethod
    async def soft_delete(
        db: AsyncSession,
        patient_id: str,
        current_user: Optional[User]
    ) -> ServiceResult[Patient]:
        """Soft delete a patient: stamp deleted_at and deleted_by."""
        if current_user is None:
            return ServiceResult.fail("You must be logged in to delete a patient")

        try:
            # No deleted_at guard: a second call re-stamps an already deleted row.
            result = await db.execute(
                update(PatientRecord)
                .where(PatientRecord.id == patient_id)
                .values(deleted_at=datetime.now(timezone.utc), deleted_by=current_user.id)
                .returning(PatientRecord)
                .execution_options(populate_existing=True)
            )
            patient = Patient.model_validate(result.scalar_one())
            await db.commit()

            logger.info(f"Patient {patient_id} deleted by {current_user.id}")
            return ServiceResult.ok(patient)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error deleting patient {patient_id}: {e}")
            return ServiceResult.fail(f"Failed to delete patient: {driver_message(e)}")
        except Exception as e:
            await db.rollback()
            logger.error(f"Unexpected error deleting patient {patient_id}: {e}")
            return ServiceResult.fail("An unexpected error occurred while deleting patient")

    @staticmethod
    async def get_recent(db: AsyncSession, limit: int = 10) -> ServiceResult[List[Patient]]:
        """Most recently updated live patients."""
        try:
            result = await db.execute(
                select(PatientRecord)
                .where(PatientRecord.deleted_at.is_(None))
                .order_by(PatientRecord.updated_at.desc())
                .limit(limit)
            )
            return ServiceResult.ok([Patient.model_validate(p) for p in result.scalars().all()])

        except SQLAlchemyError as e:
            logger.error(f"Error fetching recent patients: {e}")
            return ServiceResult.fail(f"Failed to load recent patients: {driver_message(e)}")
        except Exception as e:
            logger.error(f"Unexpected error loading recent patients: {e}")
            return ServiceResult.fail("An unexpected error occurred while loading recent patients")

    @staticmethod
    async def exists_by_national_id(db: AsyncSession, national_id: str) -> ServiceResult[bool]:
        """Duplicate check: is there a live patient with this national ID?"""
        try:
            result = await db.execute(
                select(PatientRecord.id)
                .where(
                    PatientRecord.national_id == national_id,
                    PatientRecord.deleted_at.is_(None)
                )
                .limit(1)
            )
            return ServiceResult.ok(result.first() is not None)

        except SQLAlchemyError as e:
            logger.error(f"Error checking patient existence: {e}")
            return ServiceResult.fail(f"Failed to check patient existence: {driver_message(e)}")
        except Exception as e:
            logger.error(f"Unexpected error checking patient existence: {e}")
            return ServiceResult.fail("An unexpected error occurred")
