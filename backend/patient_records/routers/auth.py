"""
Authentication routes for registration, login and logout.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.config import get_settings
from patient_records.database import get_db
from patient_records.models.user import UserCreate, UserResponse, Token, User
from patient_records.services.auth_service import AuthService, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])
settings = get_settings()


def _is_local_path(target: Optional[str]) -> bool:
    return bool(target) and target.startswith("/") and not target.startswith("//")


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """
    Register a new user (practitioner).
    """
    logger.info(f"Registering new user: {user_data.email}")
    user = await AuthService.create_user(db, user_data)
    logger.info(f"User created successfully: {user.id}")
    return UserResponse(
        id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at
    )


@router.post("/login", response_model=Token)
async def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    redirect_to: Optional[str] = Query(None, alias="redirectTo"),
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate user, set the session cookie and return the JWT token.

    With a local ``redirectTo`` the response is a 303 back to that page.
    """
    user = await AuthService.authenticate_user(db, form_data.username, form_data.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user account"
        )

    access_token = AuthService.create_access_token(
        data={"sub": str(user.id), "email": user.email, "role": user.role}
    )
    cookie = dict(
        key=settings.session_cookie_name,
        value=access_token,
        httponly=True,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60
    )

    if _is_local_path(redirect_to):
        redirect = RedirectResponse(redirect_to, status_code=status.HTTP_303_SEE_OTHER)
        redirect.set_cookie(**cookie)
        return redirect

    response.set_cookie(**cookie)
    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response):
    """Drop the session cookie."""
    response.delete_cookie(settings.session_cookie_name)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return UserResponse(
        id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        role=current_user.role,
        is_active=current_user.is_active,
        created_at=None
    )
