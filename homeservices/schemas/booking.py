from datetime import datetime
from typing import Optional

from pydantic import Field

from homeservices.db.models.booking import BookingStatus
from homeservices.schemas.common import CamelModel


# --- CREATE ---
class BookingCreate(CamelModel):
    service_id: int
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    special_instructions: Optional[str] = None
    price: float


# --- UPDATE (Partner) ---
class BookingStatusUpdate(CamelModel):
    # checked against BookingStatus by the lifecycle manager
    status: str = Field(..., min_length=1, description="Allowed values: upcoming, completed, cancelled")


class CompletionVerifyRequest(CamelModel):
    otp: str = Field(..., min_length=1)


# --- RESPONSE ---
class BookingResponse(CamelModel):
    id: int
    user_id: int
    service_id: int
    date: str
    time: str
    address: str
    special_instructions: Optional[str] = None
    price: float
    status: BookingStatus
    created_at: datetime
