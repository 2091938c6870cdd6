# homeservices/db/models/review.py
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from homeservices.db.base import Base, utcnow


class ReviewTarget(str, enum.Enum):
    PROVIDER = "provider"  # customer reviews the partner
    CUSTOMER = "customer"  # partner reviews the customer


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("booking_id", "target", name="reviews_booking_target_unique"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reviewee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target = Column(
        Enum(ReviewTarget, name="review_target", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    rating = Column(Integer, nullable=False)   # 1..5
    comment = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # relationships (helpful for response shaping)
    booking = relationship("Booking", foreign_keys=[booking_id])
    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewee = relationship("User", foreign_keys=[reviewee_id])
