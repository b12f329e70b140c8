"""
Patient Records - Main FastAPI Application

Search, create, update and soft-delete patients and their clinical notes.
Every patient and note route sits behind a session guard that sends
unauthenticated visitors to the login page.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from patient_records.config import get_settings
from patient_records.database import init_db
from patient_records.routers import (
    auth_router,
    session_router,
    patients_router,
    notes_router
)
from patient_records.routers.protected import LoginRedirect, login_redirect_handler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logger.info(f"Starting {settings.project_name} ({settings.environment})...")
    await init_db()
    logger.info("Application started successfully")

    yield

    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.project_name,
    description="Patient and clinical note records with soft delete and audit stamping.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(LoginRedirect, login_redirect_handler)

# Include routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(session_router, prefix=settings.api_v1_prefix)
app.include_router(patients_router, prefix=settings.api_v1_prefix)
app.include_router(notes_router, prefix=settings.api_v1_prefix)


@app.get("/", tags=["Health Check"])
async def root():
    """Root endpoint - API health check."""
    return {
        "status": "healthy",
        "application": settings.project_name,
        "version": "1.0.0",
        "documentation": "/docs"
    }


@app.get("/health", tags=["Health Check"])
async def health_check():
    return {"status": "healthy"}


@app.get(settings.login_path, tags=["Authentication"])
async def login_page(redirect_to: Optional[str] = Query(None, alias="redirectTo")):
    """Where the route guard sends unauthenticated visitors."""
    return {
        "detail": "Authentication required",
        "login": f"{settings.api_v1_prefix}/auth/login",
        "redirectTo": redirect_to
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "patient_records.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
