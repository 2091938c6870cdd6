from typing import List

from fastapi import APIRouter, Depends, status

from homeservices.api.deps import (
    get_booking_service,
    get_catalog_service,
    get_current_actor,
    get_profile_service,
    get_review_service,
    require_partner,
)
from homeservices.core.policy import Actor
from homeservices.schemas.booking import BookingResponse, BookingStatusUpdate
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.provider import ProviderProfileCreate, ProviderProfileResponse, ProviderProfileUpdate
from homeservices.schemas.review import RatingSummary
from homeservices.schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from homeservices.services.booking_service import BookingService
from homeservices.services.catalog_service import CatalogService
from homeservices.services.onboarding_service import ProviderProfileService
from homeservices.services.review_service import ReviewService

router = APIRouter(prefix="/provider", tags=["provider"])


# -------------------------
# Own services
# -------------------------
@router.get("/services", response_model=ApiResponse[List[ServiceResponse]])
def my_services(
    actor: Actor = Depends(require_partner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.list_partner_services(actor))


@router.post("/services", response_model=ApiResponse[ServiceResponse], status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    actor: Actor = Depends(require_partner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.create_partner_service(actor, payload.model_dump()), "Service created")


@router.put("/services/{service_id}", response_model=ApiResponse[ServiceResponse])
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    actor: Actor = Depends(require_partner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    changes = payload.model_dump(exclude_unset=True)
    return ok(catalog.update_partner_service(actor, service_id, changes), "Service updated")


@router.delete("/services/{service_id}", response_model=ApiResponse[ServiceResponse])
def delete_service(
    service_id: int,
    actor: Actor = Depends(require_partner),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.delete_partner_service(actor, service_id), "Service deactivated")


@router.get("/rating-summary", response_model=ApiResponse[RatingSummary])
def rating_summary(
    actor: Actor = Depends(require_partner),
    reviews: ReviewService = Depends(get_review_service),
):
    return ok(reviews.average_for_provider(actor.user_id))


# -------------------------
# Bookings (same as /partner)
# -------------------------
@router.get("/bookings", response_model=ApiResponse[List[BookingResponse]])
def provider_bookings(
    actor: Actor = Depends(require_partner),
    bookings: BookingService = Depends(get_booking_service),
):
    return ok(bookings.list_for_partner(actor))


@router.put("/bookings/{booking_id}/status", response_model=ApiResponse[BookingResponse])
def provider_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    actor: Actor = Depends(require_partner),
    bookings: BookingService = Depends(get_booking_service),
):
    return ok(bookings.transition(booking_id, actor, payload.status), "Booking status updated")


# -------------------------
# Onboarding profile
# -------------------------
@router.get("/profile", response_model=ApiResponse[ProviderProfileResponse])
def my_profile(
    actor: Actor = Depends(get_current_actor),
    profiles: ProviderProfileService = Depends(get_profile_service),
):
    return ok(profiles.my_profile(actor))


@router.post("/profile", response_model=ApiResponse[ProviderProfileResponse], status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: ProviderProfileCreate,
    actor: Actor = Depends(get_current_actor),
    profiles: ProviderProfileService = Depends(get_profile_service),
):
    return ok(profiles.create(actor, payload.model_dump(exclude_unset=True)), "Profile submitted for review")


@router.put("/profile", response_model=ApiResponse[ProviderProfileResponse])
def update_profile(
    payload: ProviderProfileUpdate,
    actor: Actor = Depends(get_current_actor),
    profiles: ProviderProfileService = Depends(get_profile_service),
):
    return ok(profiles.update(actor, payload.model_dump(exclude_unset=True)), "Profile updated")
