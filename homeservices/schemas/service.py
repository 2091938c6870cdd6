# homeservices/schemas/service.py

from datetime import datetime
from typing import Optional

from pydantic import Field

from homeservices.schemas.common import CamelModel


# Categories & types
class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    emoji: Optional[str] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    emoji: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ServiceTypeCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class ServiceTypeResponse(CamelModel):
    id: int
    category_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


# Shared fields
class ServiceBase(CamelModel):
    name: str = Field(..., min_length=1)
    price: float
    description: Optional[str] = None
    service_type: Optional[str] = None
    category_id: Optional[int] = None
    service_type_id: Optional[int] = None
    duration_minutes: Optional[int] = None
    availability: bool = True
    time_slots: Optional[str] = None


# Admin or partner creates service
class ServiceCreate(ServiceBase):
    pass


# Partner updates service
class ServiceUpdate(CamelModel):
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    service_type: Optional[str] = None
    category_id: Optional[int] = None
    service_type_id: Optional[int] = None
    duration_minutes: Optional[int] = None
    availability: Optional[bool] = None
    time_slots: Optional[str] = None


# What API returns
class ServiceResponse(ServiceBase):
    id: int
    provider_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
