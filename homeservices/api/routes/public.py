from typing import List

from fastapi import APIRouter, Depends, Query

from homeservices.api.deps import get_occupation_service, get_review_service
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.provider import OccupationResponse
from homeservices.schemas.review import RatingSummary, ReviewResponse
from homeservices.services.onboarding_service import OccupationService
from homeservices.services.review_service import ReviewService

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/providers/{provider_id}/reviews", response_model=ApiResponse[List[ReviewResponse]])
def provider_reviews(
    provider_id: int,
    limit: int = Query(20, ge=1, le=100),
    reviews: ReviewService = Depends(get_review_service),
):
    return ok(reviews.list_for_provider(provider_id, limit=limit))


@router.get("/providers/{provider_id}/rating", response_model=ApiResponse[RatingSummary])
def provider_rating(provider_id: int, reviews: ReviewService = Depends(get_review_service)):
    return ok(reviews.average_for_provider(provider_id))


@router.get("/occupations", response_model=ApiResponse[List[OccupationResponse]])
def active_occupations(occupations: OccupationService = Depends(get_occupation_service)):
    return ok(occupations.list_active())
