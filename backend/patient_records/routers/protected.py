"""
Route guard for protected pages and the session "layout" endpoint.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from patient_records.config import get_settings
from patient_records.database import get_db
from patient_records.models.result import ServiceResult
from patient_records.models.user import SessionContext
from patient_records.services.auth_service import safe_get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Session"])
settings = get_settings()


class LoginRedirect(Exception):
    """Raised by the guard; rendered as a 303 to the login page."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


def login_url(path: str) -> str:
    return f"{settings.login_path}?redirectTo={path}"


async def require_session(request: Request, db: AsyncSession = Depends(get_db)) -> SessionContext:
    """Dependency guarding every protected route."""
    context = await safe_get_session(request, db)

    if context.session is None:
        logger.info(f"Unauthenticated request to {request.url.path}, redirecting to login")
        raise LoginRedirect(login_url(request.url.path))

    return context


async def login_redirect_handler(request: Request, exc: LoginRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)


def unwrap(result: ServiceResult, not_found: Optional[str] = None):
    """Turn a service envelope into a response body or an HTTPException."""
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    if not_found and result.data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    return result.data


@router.get("/session", response_model=SessionContext)
async def load_session(context: SessionContext = Depends(require_session)):
    """Session and user for protected pages."""
    return context
