"""
PostgreSQL database connection and tables using SQLAlchemy (asyncio).
"""
from sqlalchemy import Column, String, DateTime, Date, Text, Boolean, ForeignKey, Integer, select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
from patient_records.config import get_settings
import uuid
import logging

logger = logging.getLogger(__name__)

settings = get_settings()


def async_database_url(url: str) -> str:
    """Route plain postgres URLs through the async psycopg 3 driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


engine = create_async_engine(
    async_database_url(settings.database_url),
    echo=settings.debug,
    pool_pre_ping=True
)

SessionLocal = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


def next_patient_number():
    """SQL expression for the next sequential patient number, evaluated by the INSERT."""
    return select(func.coalesce(func.max(PatientRecord.patient_number), 0) + 1).scalar_subquery()


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(String(50), default="practitioner")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class PatientRecord(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    patient_number = Column(Integer, nullable=False, unique=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=False)
    national_id = Column(String(50), nullable=True, index=True)
    gender = Column(String(10), nullable=True)  # male, female, other
    phone_number = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    postal_code = Column(String(20), nullable=True)
    occupation = Column(String(255), nullable=True)
    hobby = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    notes = relationship("NoteRecord", back_populates="patient")


class NoteRecord(Base):
    __tablename__ = "patient_notes"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    note_text = Column(Text, nullable=False)
    note_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    patient = relationship("PatientRecord", back_populates="notes")


async def init_db():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")


async def get_db():
    """Dependency to get database session."""
    async with SessionLocal() as db:
        yield db
