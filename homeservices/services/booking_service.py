"""
Booking lifecycle.

    upcoming --> completed
             \-> cancelled

A partner may set any status on a booking of a service they own. Besides the
direct status update, completion can go through a two-party OTP handshake:
the code is mailed to the *customer*, who relays it to the partner, and only
a verified code completes the booking.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from homeservices.core.errors import BookingNotFound, CustomerNotFound, InvalidStatus, ServiceNotFound
from homeservices.core.policy import (
    Actor,
    booking_owner_partner_id,
    require_authenticated,
    require_ownership,
    require_role,
)
from homeservices.db.models.booking import Booking, BookingStatus
from homeservices.db.models.service import Service
from homeservices.db.models.user import Role, User
from homeservices.services.otp_service import OtpService

logger = logging.getLogger(__name__)

NOT_YOUR_BOOKING = "You can only operate on your own bookings"


def parse_status(value) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError as e:
        raise InvalidStatus() from e


class BookingService:
    def __init__(self, db: Session, otp: Optional[OtpService] = None):
        self.db = db
        self.otp = otp

    def create(
        self,
        actor: Actor,
        service_id: int,
        date: str,
        time: str,
        address: str,
        price: float,
        special_instructions: Optional[str] = None,
    ) -> Booking:
        actor = require_authenticated(actor)

        service = self.db.query(Service).filter(Service.id == service_id).first()
        if not service or not service.availability:
            # deactivated services stay referenced by old bookings but take no new ones
            raise ServiceNotFound()

        booking = Booking(
            user_id=actor.user_id,
            service_id=service.id,
            date=date,
            time=time,
            address=address,
            special_instructions=special_instructions,
            price=price,
            status=BookingStatus.UPCOMING,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"📅 Booking {booking.id} created by user {actor.user_id} for service {service.id}")
        return booking

    def get(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise BookingNotFound()
        return booking

    def list_for_customer(self, actor: Actor) -> List[Booking]:
        actor = require_authenticated(actor)
        return (
            self.db.query(Booking)
            .filter(Booking.user_id == actor.user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    def list_for_partner(self, actor: Actor) -> List[Booking]:
        actor = require_role(actor, Role.PARTNER)
        return (
            self.db.query(Booking)
            .join(Service, Booking.service_id == Service.id)
            .filter(Service.provider_id == actor.user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    def _owned_booking(self, booking_id: int, actor: Actor) -> Booking:
        booking = self.get(booking_id)
        require_ownership(actor, booking_owner_partner_id(booking), NOT_YOUR_BOOKING)
        return booking

    def _set_status(self, booking: Booking, status: BookingStatus) -> Booking:
        previous = booking.status
        booking.status = status
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"🔁 Booking {booking.id}: {previous.value} -> {status.value}")
        return booking

    def transition(self, booking_id: int, actor: Actor, target_status) -> Booking:
        actor = require_role(actor, Role.PARTNER)
        status = parse_status(target_status)
        booking = self._owned_booking(booking_id, actor)

        if status is BookingStatus.COMPLETED:
            # trust boundary: completion without the customer's OTP
            logger.warning(f"⚠️ Booking {booking.id} completed directly by partner {actor.user_id} without OTP")
        return self._set_status(booking, status)

    def _customer_of(self, booking: Booking) -> User:
        customer = self.db.query(User).filter(User.id == booking.user_id).first()
        if not customer:
            raise CustomerNotFound()
        return customer

    def request_completion_otp(self, booking_id: int, actor: Actor) -> None:
        actor = require_role(actor, Role.PARTNER)
        booking = self._owned_booking(booking_id, actor)
        customer = self._customer_of(booking)

        self.otp.create_and_send(customer)
        logger.info(f"📨 Completion OTP for booking {booking.id} sent to customer {customer.id}")

    def verify_completion_otp(self, booking_id: int, actor: Actor, otp: str) -> Booking:
        actor = require_role(actor, Role.PARTNER)
        booking = self._owned_booking(booking_id, actor)
        customer = self._customer_of(booking)

        self.otp.verify(customer.email, otp)
        logger.info(f"✅ Customer {customer.id} confirmed completion of booking {booking.id}")
        return self._set_status(booking, BookingStatus.COMPLETED)
