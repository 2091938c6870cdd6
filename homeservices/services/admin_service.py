from sqlalchemy import func
from sqlalchemy.orm import Session

from homeservices.core.policy import Actor, require_role
from homeservices.db.models.booking import Booking
from homeservices.db.models.service import Service
from homeservices.db.models.user import Role, User


class AdminService:
    def __init__(self, db: Session):
        self.db = db

    def stats(self, actor: Actor, recent: int = 5) -> dict:
        require_role(actor, Role.ADMIN)
        total_users = self.db.query(func.count(User.id)).scalar() or 0
        total_services = self.db.query(func.count(Service.id)).scalar() or 0
        total_bookings = self.db.query(func.count(Booking.id)).scalar() or 0

        recent_bookings = (
            self.db.query(Booking).order_by(Booking.created_at.desc(), Booking.id.desc()).limit(recent).all()
        )
        recent_services = (
            self.db.query(Service).order_by(Service.created_at.desc(), Service.id.desc()).limit(recent).all()
        )
        return {
            "counts": {
                "users": int(total_users),
                "services": int(total_services),
                "bookings": int(total_bookings),
            },
            "recent": {
                "bookings": recent_bookings,
                "services": recent_services,
            },
        }
