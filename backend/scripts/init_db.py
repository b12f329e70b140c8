"""
Database initialization script.
Creates tables and an initial admin practitioner.
"""
import asyncio
import os

from patient_records.database import SessionLocal, init_db
from patient_records.models.user import UserCreate, UserRole
from patient_records.services.auth_service import AuthService

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@patientrecords.org")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me-now")


async def init_database():
    """Create tables and the default admin user if missing."""
    print("Initializing database...")
    await init_db()

    async with SessionLocal() as db:
        print("Checking for admin user...")
        admin = await AuthService.get_user_by_email(db, ADMIN_EMAIL)

        if not admin:
            print("Creating default admin user...")
            await AuthService.create_user(db, UserCreate(
                email=ADMIN_EMAIL,
                full_name="System Administrator",
                role=UserRole.ADMIN,
                password=ADMIN_PASSWORD
            ))
            print(f"Admin user created (email: {ADMIN_EMAIL})")
            if ADMIN_PASSWORD == "change-me-now":
                print("IMPORTANT: set ADMIN_PASSWORD, the default password is in use!")
        else:
            print("Admin user already exists")

    print("Database initialization complete!")


if __name__ == "__main__":
    asyncio.run(init_database())
