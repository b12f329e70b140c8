"""
Authentication service for practitioner accounts and session resolution.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.config import get_settings
from patient_records.database import get_db, UserRecord
from patient_records.models.user import UserCreate, User, AuthSession, SessionContext

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class AuthService:
    """Service for authentication and authorization."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token."""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[UserRecord]:
        """Get a user by email from database."""
        result = await db.execute(select(UserRecord).where(UserRecord.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[UserRecord]:
        """Get a user by ID from database."""
        result = await db.execute(select(UserRecord).where(UserRecord.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[UserRecord]:
        """Authenticate a user with email and password."""
        user = await AuthService.get_user_by_email(db, email)
        if not user or not AuthService.verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    async def create_user(db: AsyncSession, user_data: UserCreate) -> UserRecord:
        """Create a new user in database."""
        existing = await AuthService.get_user_by_email(db, user_data.email)
        if existing:
            raise HTTPException(status_code=400, detail="Email already registered")

        db_user = UserRecord(
            email=user_data.email,
            hashed_password=AuthService.get_password_hash(user_data.password),
            full_name=user_data.full_name,
            role=user_data.role.value,
            is_active=True
        )

        db.add(db_user)
        await db.commit()
        await db.refresh(db_user)

        return db_user


def _token_from_request(request: Request) -> Optional[str]:
    """Session token from the session cookie, else from ``Authorization: Bearer``."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token

    parts = request.headers.get("authorization", "").split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


async def safe_get_session(request: Request, db: AsyncSession) -> SessionContext:
    """Resolve the current session.

    Returns an empty context instead of raising when the token is missing,
    malformed, expired or points at an unknown or inactive user.
    """
    token = _token_from_request(request)
    if not token:
        return SessionContext()

    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.warning(f"Rejected session token: {e}")
        return SessionContext()

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("No 'sub' (user_id) claim in session token")
        return SessionContext()

    try:
        user = await AuthService.get_user_by_id(db, user_id)
        if user is None or not user.is_active:
            logger.warning(f"Session token for unknown or inactive user: {user_id}")
            return SessionContext()

        session_user = User(
            id=str(user.id),
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            is_active=user.is_active
        )
    except (SQLAlchemyError, ValidationError) as e:
        logger.warning(f"Could not resolve session user {user_id}: {e}")
        return SessionContext()

    expires_at = None
    if payload.get("exp"):
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

    return SessionContext(
        session=AuthSession(access_token=token, expires_at=expires_at),
        user=session_user
    )


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Dependency for API clients: 401 instead of a login redirect."""
    context = await safe_get_session(request, db)
    if context.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context.user
