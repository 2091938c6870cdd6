from typing import List

from fastapi import APIRouter, Depends

from homeservices.api.deps import get_admin_service, get_profile_service, require_admin
from homeservices.core.policy import Actor
from homeservices.schemas.admin import AdminStatsResponse
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.provider import ProviderProfileResponse
from homeservices.services.admin_service import AdminService
from homeservices.services.onboarding_service import ProviderProfileService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=ApiResponse[AdminStatsResponse])
def stats(actor: Actor = Depends(require_admin), admin: AdminService = Depends(get_admin_service)):
    return ok(admin.stats(actor))


@router.get("/provider-profiles", response_model=ApiResponse[List[ProviderProfileResponse]])
def provider_profiles(
    actor: Actor = Depends(require_admin),
    profiles: ProviderProfileService = Depends(get_profile_service),
):
    return ok(profiles.list_all(actor))


@router.patch("/provider-profiles/{profile_id}/verify", response_model=ApiResponse[ProviderProfileResponse])
def verify_profile(
    profile_id: int,
    actor: Actor = Depends(require_admin),
    profiles: ProviderProfileService = Depends(get_profile_service),
):
    return ok(profiles.verify_and_promote(actor, profile_id), "Provider verified")
