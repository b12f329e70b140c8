import pytest
from datetime import date
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from patient_records.database import Base, UserRecord, get_db
from patient_records.main import app
from patient_records.models.patient import PatientFormData
from patient_records.models.user import User
from patient_records.services.auth_service import AuthService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def _add_user(session_factory, email, full_name, is_active=True):
    async with session_factory() as session:
        record = UserRecord(
            email=email,
            hashed_password=AuthService.get_password_hash("correct-horse-battery"),
            full_name=full_name,
            role="practitioner",
            is_active=is_active,
        )
        session.add(record)
        await session.commit()
        return User(
            id=record.id,
            email=record.email,
            full_name=record.full_name,
            role=record.role,
            is_active=record.is_active,
        )


@pytest.fixture
async def practitioner(session_factory):
    return await _add_user(session_factory, "ada@clinic.org", "Ada Lovelace")


@pytest.fixture
async def other_practitioner(session_factory):
    return await _add_user(session_factory, "grace@clinic.org", "Grace Hopper")


@pytest.fixture
async def inactive_practitioner(session_factory):
    return await _add_user(session_factory, "retired@clinic.org", "Old Timer", is_active=False)


@pytest.fixture
def patient_form():
    def build(**overrides):
        data = {
            "first_name": "John",
            "last_name": "Smith",
            "date_of_birth": date(1980, 5, 17),
            "national_id": None,
            "gender": "male",
            "phone_number": "+1 555 0100",
            "email": "john.smith@mail.org",
        }
        data.update(overrides)
        return PatientFormData(**data)
    return build


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(practitioner):
    token = AuthService.create_access_token(data={"sub": practitioner.id})
    return {"Authorization": f"Bearer {token}"}
