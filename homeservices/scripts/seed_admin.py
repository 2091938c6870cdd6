#!/usr/bin/env python3
"""
Create the first admin account, or promote an existing user to admin.

    ADMIN_EMAIL=... ADMIN_PASSWORD=... python -m homeservices.scripts.seed_admin
"""
import logging
import os
import sys

from sqlalchemy.orm import Session

from homeservices.core.config import Settings, get_settings
from homeservices.core.security import PasswordHasher
from homeservices.db.base import SessionLocal, init_db
from homeservices.db.models.user import Role, User
from homeservices.services.identity import IdentityProvider, build_identity_provider

logger = logging.getLogger(__name__)


def seed_admin(
    db: Session,
    settings: Settings,
    identity: IdentityProvider,
    email: str,
    password: str,
    full_name: str = "Administrator",
):
    """Return ``(user, created)``; an existing account keeps its password."""
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        if existing.role != Role.ADMIN:
            existing.role = Role.ADMIN
            db.commit()
            logger.info(f"⬆️ Promoted {email} to admin")
        else:
            logger.info(f"Admin user already exists: {email}")
        return existing, False

    user = User(
        external_uid=identity.create_user(email, password, full_name),
        email=email,
        password_hash=PasswordHasher(settings.password_hash_rounds).hash(password),
        full_name=full_name,
        role=Role.ADMIN,
        is_email_verified=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"✅ Admin user created: {email}")
    return user, True


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = get_settings()

    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.error("❌ ADMIN_EMAIL and ADMIN_PASSWORD must be set")
        return 1

    init_db()
    db = SessionLocal()
    try:
        seed_admin(
            db,
            settings,
            build_identity_provider(settings),
            email.strip().lower(),
            password,
            os.getenv("ADMIN_FULL_NAME", "Administrator"),
        )
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
