# homeservices/db/models/service.py

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from homeservices.db.base import Base, utcnow


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign keys
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # null for admin catalog items
    category_id = Column(Integer, ForeignKey("service_categories.id"), nullable=True)
    service_type_id = Column(Integer, ForeignKey("service_types.id"), nullable=True)

    # Basic details
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    service_type = Column(String, nullable=True)  # legacy free-text type

    # Pricing
    price = Column(Float, nullable=False)

    # Duration (in minutes)
    duration_minutes = Column(Integer, nullable=True)

    # Status
    availability = Column(Boolean, nullable=False, default=True)
    time_slots = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    provider = relationship("User", back_populates="services")
    category = relationship("ServiceCategory", back_populates="services")
