# homeservices/schemas/review.py
from datetime import datetime
from typing import Optional

from pydantic import Field, conint

from homeservices.db.models.review import ReviewTarget
from homeservices.schemas.common import CamelModel


class ReviewCreate(CamelModel):
    booking_id: int
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = None
    target: ReviewTarget = ReviewTarget.PROVIDER


class CustomerReviewCreate(CamelModel):
    """A partner rating the customer of one of their bookings."""

    booking_id: int
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = None


class ReviewResponse(CamelModel):
    id: int
    booking_id: int
    reviewer_id: int
    reviewee_id: int
    target: ReviewTarget
    rating: int
    comment: Optional[str]
    created_at: datetime


class RatingSummary(CamelModel):
    average_rating: float
    ratings_count: int
