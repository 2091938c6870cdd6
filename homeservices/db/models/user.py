# homeservices/db/models/user.py
import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from homeservices.db.base import Base, utcnow


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    PARTNER = "partner"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    external_uid = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=True)  # null for legacy/SSO accounts
    full_name = Column(String, nullable=False)
    role = Column(
        Enum(Role, name="role", values_callable=lambda e: [m.value for m in e], validate_strings=True),
        nullable=False,
        default=Role.USER,
    )
    is_email_verified = Column(Boolean, nullable=False, default=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    services = relationship("Service", back_populates="provider", lazy="selectin")
    provider_profile = relationship("ProviderProfile", back_populates="user", uselist=False)


class UserSession(Base):
    """Revoked access tokens; only the SHA-256 digest of the token is stored."""

    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token_hash = Column(String(64), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    is_valid = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
