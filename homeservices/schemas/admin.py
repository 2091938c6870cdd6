# homeservices/schemas/admin.py
from datetime import datetime
from typing import List, Optional

from homeservices.schemas.common import CamelModel


class RecentBooking(CamelModel):
    id: int
    date: str
    time: str
    price: float
    created_at: datetime


class RecentService(CamelModel):
    id: int
    name: str
    price: float
    service_type: Optional[str] = None
    created_at: datetime


class StatsCounts(CamelModel):
    users: int
    services: int
    bookings: int


class StatsRecent(CamelModel):
    bookings: List[RecentBooking]
    services: List[RecentService]


class AdminStatsResponse(CamelModel):
    counts: StatsCounts
    recent: StatsRecent
