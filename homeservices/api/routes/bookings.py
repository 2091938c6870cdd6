from typing import List

from fastapi import APIRouter, Depends, status

from homeservices.api.deps import get_booking_service, get_current_actor
from homeservices.core.policy import Actor
from homeservices.schemas.booking import BookingCreate, BookingResponse
from homeservices.schemas.common import ApiResponse, ok
from homeservices.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


# Customer creates booking
@router.post("", response_model=ApiResponse[BookingResponse], status_code=status.HTTP_201_CREATED)
def create_booking(
    booking: BookingCreate,
    actor: Actor = Depends(get_current_actor),
    bookings: BookingService = Depends(get_booking_service),
):
    created = bookings.create(
        actor,
        service_id=booking.service_id,
        date=booking.date,
        time=booking.time,
        address=booking.address,
        price=booking.price,
        special_instructions=booking.special_instructions,
    )
    return ok(created, "Booking created")


# Customer views own bookings
@router.get("/me", response_model=ApiResponse[List[BookingResponse]])
def my_bookings(
    actor: Actor = Depends(get_current_actor),
    bookings: BookingService = Depends(get_booking_service),
):
    return ok(bookings.list_for_customer(actor))
