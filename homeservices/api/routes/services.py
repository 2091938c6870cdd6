from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from homeservices.api.deps import get_catalog_service, require_admin
from homeservices.core.policy import Actor
from homeservices.schemas.common import ApiResponse, ok
from homeservices.schemas.service import ServiceCreate, ServiceResponse
from homeservices.services.catalog_service import CatalogService

router = APIRouter(prefix="/services", tags=["services"])
types_router = APIRouter(prefix="/service-types", tags=["services"])


# -------------------------
# Public
# -------------------------
@router.get("", response_model=ApiResponse[List[ServiceResponse]])
def list_services(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    service_type_id: Optional[int] = Query(None, alias="serviceTypeId"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.list_services(limit, offset, category_id, service_type_id))


@router.get("/{service_id}", response_model=ApiResponse[ServiceResponse])
def get_service(service_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return ok(catalog.get_service(service_id))


@types_router.get("/{service_type_id}/services", response_model=ApiResponse[List[ServiceResponse]])
def services_by_type(service_type_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return ok(catalog.services_by_type(service_type_id))


# -------------------------
# Admin catalog
# -------------------------
@router.post("", response_model=ApiResponse[ServiceResponse], status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    actor: Actor = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return ok(catalog.create_catalog_service(actor, payload.model_dump()), "Service created")
