from typing import List

from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_occupation_service, require_admin
from homeservices.core.policy import Actor
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.provider import OccupationCreate, OccupationResponse, OccupationUpdate
from homeservices.services.onboarding_service import OccupationService

router = APIRouter(prefix="/occupations", tags=["occupations"])


@router.get("", response_model=ApiResponse[List[OccupationResponse]])
def list_occupations(actor: Actor = Depends(require_admin), occupations: OccupationService = Depends(get_occupation_service)):
    return ok(occupations.list_all(actor))


@router.post("", response_model=ApiResponse[OccupationResponse], status_code=status.HTTP_201_CREATED)
def create_occupation(
    payload: OccupationCreate,
    actor: Actor = Depends(require_admin),
    occupations: OccupationService = Depends(get_occupation_service),
):
    created = occupations.create(actor, payload.name, payload.description, payload.is_active)
    return ok(created, "Occupation created")


@router.get("/{occupation_id}", response_model=ApiResponse[OccupationResponse])
def get_occupation(
    occupation_id: int,
    actor: Actor = Depends(require_admin),
    occupations: OccupationService = Depends(get_occupation_service),
):
    return ok(occupations.get(actor, occupation_id))


@router.put("/{occupation_id}", response_model=ApiResponse[OccupationResponse])
def update_occupation(
    occupation_id: int,
    payload: OccupationUpdate,
    actor: Actor = Depends(require_admin),
    occupations: OccupationService = Depends(get_occupation_service),
):
    updated = occupations.update(actor, occupation_id, payload.model_dump(exclude_unset=True))
    return ok(updated, "Occupation updated")


@router.delete("/{occupation_id}", response_model=ApiResponse)
def delete_occupation(
    occupation_id: int,
    actor: Actor = Depends(require_admin),
    occupations: OccupationService = Depends(get_occupation_service),
):
    occupations.delete(actor, occupation_id)
    return ok(message="Occupation deleted successfully")
