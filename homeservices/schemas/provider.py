from datetime import datetime
from typing import List, Optional

from pydantic import Field

from homeservices.schemas.common import CamelModel


class OccupationCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    is_active: bool = True


class OccupationUpdate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class OccupationResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProviderProfileCreate(CamelModel):
    occupation_id: Optional[int] = None
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    phone_number: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    bio: Optional[str] = None


class ProviderProfileUpdate(ProviderProfileCreate):
    pass


class ProfileUser(CamelModel):
    id: int
    full_name: str
    email: str


class ProviderProfileResponse(ProviderProfileCreate):
    id: int
    user_id: int
    is_verified: bool
    is_active: bool
    user: Optional[ProfileUser] = None
    occupation: Optional[OccupationResponse] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AddressCreate(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pin_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    apartment: Optional[str] = None
    landmark: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_default: bool = False


class AddressUpdate(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = None
    country: Optional[str] = None
    apartment: Optional[str] = None
    landmark: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_default: Optional[bool] = None


class AddressResponse(AddressCreate):
    id: int
    user_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
