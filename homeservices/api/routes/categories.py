from typing import List

from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_catalog_service, require_admin
from homeservices.core.policy import Actor
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.service import CategoryCreate, CategoryResponse, ServiceTypeCreate, ServiceTypeResponse
from homeservices.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=ApiResponse[List[CategoryResponse]])
def list_categories(catalog: CatalogService = Depends(get_catalog_service)):
    return ok(catalog.list_categories())


@router.post("", response_model=ApiResponse[CategoryResponse], status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    actor: Actor = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.create_category(actor, payload.name, payload.description, payload.emoji), "Category created")


@router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
def get_category(category_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return ok(catalog.get_category(category_id))


@router.get("/{category_id}/types", response_model=ApiResponse[List[ServiceTypeResponse]])
def list_types(category_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return ok(catalog.list_types(category_id))


@router.post(
    "/{category_id}/types",
    response_model=ApiResponse[ServiceTypeResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_type(
    category_id: int,
    payload: ServiceTypeCreate,
    actor: Actor = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.create_type(actor, category_id, payload.name, payload.description), "Service type created")
