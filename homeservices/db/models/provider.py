# homeservices/db/models/provider.py
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship

from homeservices.db.base import Base, utcnow


class Occupation(Base):
    """Admin-managed list of trades a partner can register under."""

    __tablename__ = "occupations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class ProviderProfile(Base):
    __tablename__ = "provider_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    occupation_id = Column(Integer, ForeignKey("occupations.id"), nullable=True)
    address_id = Column(Integer, ForeignKey("address.id"), nullable=True)

    business_name = Column(String, nullable=True)
    business_address = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    experience = Column(String, nullable=True)  # years of experience
    skills = Column(JSON, nullable=True)
    certifications = Column(JSON, nullable=True)
    bio = Column(String, nullable=True)

    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="provider_profile", lazy="joined")
    occupation = relationship("Occupation", lazy="joined")


class Address(Base):
    __tablename__ = "address"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    street = Column(String, nullable=False)
    landmark = Column(String, nullable=True)
    apartment = Column(String, nullable=True)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    pin_code = Column(String, nullable=False)
    country = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
