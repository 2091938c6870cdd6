from typing import List

from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_address_service, get_current_actor
from homeservices.core.policy import Actor
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.provider import AddressCreate, AddressResponse, AddressUpdate
from homeservices.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.get("/me", response_model=ApiResponse[List[AddressResponse]])
def my_addresses(actor: Actor = Depends(get_current_actor), addresses: AddressService = Depends(get_address_service)):
    return ok(addresses.list_mine(actor))


@router.post("", response_model=ApiResponse[AddressResponse], status_code=status.HTTP_201_CREATED)
def create_address(
    payload: AddressCreate,
    actor: Actor = Depends(get_current_actor),
    addresses: AddressService = Depends(get_address_service),
):
    return ok(addresses.create(actor, payload.model_dump()), "Address added")


@router.put("/{address_id}", response_model=ApiResponse[AddressResponse])
def update_address(
    address_id: int,
    payload: AddressUpdate,
    actor: Actor = Depends(get_current_actor),
    addresses: AddressService = Depends(get_address_service),
):
    return ok(addresses.update(actor, address_id, payload.model_dump(exclude_unset=True)), "Address updated")


@router.delete("/{address_id}", response_model=ApiResponse)
def delete_address(
    address_id: int,
    actor: Actor = Depends(get_current_actor),
    addresses: AddressService = Depends(get_address_service),
):
    addresses.delete(actor, address_id)
    return ok(message="Address deleted")
