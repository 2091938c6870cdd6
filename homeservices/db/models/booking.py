import enum

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from homeservices.db.base import Base, utcnow


class BookingStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)

    date = Column(String, nullable=False)
    time = Column(String, nullable=False)

    address = Column(String, nullable=False)
    special_instructions = Column(String, nullable=True)
    price = Column(Float, nullable=False)

    status = Column(
        Enum(BookingStatus, name="booking_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BookingStatus.UPCOMING,
    )

    created_at = Column(DateTime, nullable=False, default=utcnow)

    # relationships
    customer = relationship("User", foreign_keys=[user_id])
    service = relationship("Service", foreign_keys=[service_id], lazy="joined")
