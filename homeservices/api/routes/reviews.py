# homeservices/api/routes/reviews.py
from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_current_actor, get_review_service
from homeservices.core.policy import Actor
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.review import ReviewCreate, ReviewResponse
from homeservices.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ApiResponse[ReviewResponse], status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    actor: Actor = Depends(get_current_actor),
    reviews: ReviewService = Depends(get_review_service),
):
    review = reviews.submit(actor, payload.booking_id, payload.rating, payload.comment, target=payload.target)
    return ok(review, "Review submitted")
