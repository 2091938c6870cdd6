import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from homeservices.core.errors import (
    BookingNotCompleted,
    BookingNotFound,
    DuplicateReview,
    InvalidRating,
    ValidationError,
)
from homeservices.core.policy import Actor, booking_owner_partner_id, require_authenticated, require_ownership
from homeservices.db.models.booking import Booking, BookingStatus
from homeservices.db.models.review import Review, ReviewTarget

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_booking_and_target(self, booking_id: int, target: ReviewTarget) -> Optional[Review]:
        return (
            self.db.query(Review)
            .filter(Review.booking_id == booking_id, Review.target == target)
            .first()
        )

    def submit(
        self,
        actor: Actor,
        booking_id: int,
        rating: int,
        comment: Optional[str] = None,
        target: ReviewTarget = ReviewTarget.PROVIDER,
    ) -> Review:
        actor = require_authenticated(actor)
        try:
            target = ReviewTarget(target)
        except ValueError as e:
            raise ValidationError("target must be provider or customer") from e

        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise InvalidRating()

        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise BookingNotFound()
        if booking.status != BookingStatus.COMPLETED:
            raise BookingNotCompleted()

        provider_id = booking_owner_partner_id(booking)
        if target is ReviewTarget.PROVIDER:
            # the customer rates the partner who served them
            require_ownership(actor, booking.user_id, "Not allowed to review this booking")
            if provider_id is None:
                raise ValidationError("This booking has no provider to review")
            reviewee_id = provider_id
        else:
            require_ownership(actor, provider_id, "You can only review customers for your own services")
            reviewee_id = booking.user_id

        if self.get_by_booking_and_target(booking.id, target):
            raise DuplicateReview()

        review = Review(
            booking_id=booking.id,
            reviewer_id=actor.user_id,
            reviewee_id=reviewee_id,
            target=target,
            rating=rating,
            comment=comment,
        )
        self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError as e:
            # a concurrent submission for the same (booking, target) won
            self.db.rollback()
            raise DuplicateReview() from e
        self.db.refresh(review)

        logger.info(f"⭐ Review {review.id} ({target.value}) on booking {booking.id} by user {actor.user_id}")
        return review

    def average_for_provider(self, provider_id: int) -> dict:
        avg, count = (
            self.db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.target == ReviewTarget.PROVIDER, Review.reviewee_id == provider_id)
            .one()
        )
        return {
            "average_rating": float(avg) if avg is not None else 0.0,
            "ratings_count": int(count or 0),
        }

    def list_for_provider(self, provider_id: int, limit: int = 20) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.target == ReviewTarget.PROVIDER, Review.reviewee_id == provider_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(limit)
            .all()
        )
