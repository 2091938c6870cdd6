from typing import List

from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_booking_service, get_review_service, require_partner
from homeservices.core.policy import Actor
from homeservices.db.models.review import ReviewTarget
from homeservices.schemas.booking import BookingResponse, BookingStatusUpdate, CompletionVerifyRequest
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.review import CustomerReviewCreate, ReviewResponse
from homeservices.services.booking_service import BookingService
from homeservices.services.review_service import ReviewService

router = APIRouter(prefix="/partner", tags=["partner"])


@router.get("/bookings", response_model=ApiResponse[List[BookingResponse]])
def partner_bookings(
    actor: Actor = Depends(require_partner),
    bookings: BookingService = Depends(get_booking_service),
):
    return ok(bookings.list_for_partner(actor))


@router.put("/bookings/{booking_id}/status", response_model=ApiResponse[BookingResponse])
def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    actor: Actor = Depends(require_partner),
    bookings: BookingService = Depends(get_booking_service),
):
    booking = bookings.transition(booking_id, actor, payload.status)
    return ok(booking, "Booking status updated")


@router.post("/bookings/{booking_id}/complete-otp", response_model=ApiResponse)
def request_completion_otp(
    booking_id: int,
    actor: Actor = Depends(require_partner),
    bookings: BookingService = Depends(get_booking_service),
):
    bookings.request_completion_otp(booking_id, actor)
    return ok(message="OTP sent to customer")


@router.post("/bookings/{booking_id}/complete-verify", response_model=ApiResponse[BookingResponse])
def verify_completion_otp(
    booking_id: int,
    payload: CompletionVerifyRequest,
    actor: Actor = Depends(require_partner),
    bookings: BookingService = Depends(get_booking_service),
):
    booking = bookings.verify_completion_otp(booking_id, actor, payload.otp)
    return ok(booking, "Booking marked as completed")


# Partner rates the customer of a completed booking
@router.post("/reviews", response_model=ApiResponse[ReviewResponse], status_code=status.HTTP_201_CREATED)
def review_customer(
    payload: CustomerReviewCreate,
    actor: Actor = Depends(require_partner),
    reviews: ReviewService = Depends(get_review_service),
):
    review = reviews.submit(
        actor, payload.booking_id, payload.rating, payload.comment, target=ReviewTarget.CUSTOMER
    )
    return ok(review, "Review submitted")
