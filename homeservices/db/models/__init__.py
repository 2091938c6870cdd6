from homeservices.db.models.user import Role, User, UserSession
from homeservices.db.models.email_verification import EmailVerificationToken
from homeservices.db.models.category import ServiceCategory, ServiceType
from homeservices.db.models.service import Service
from homeservices.db.models.booking import Booking, BookingStatus
from homeservices.db.models.review import Review, ReviewTarget
from homeservices.db.models.provider import Address, Occupation, ProviderProfile

__all__ = [
    "Address",
    "Booking",
    "BookingStatus",
    "EmailVerificationToken",
    "Occupation",
    "ProviderProfile",
    "Review",
    "ReviewTarget",
    "Role",
    "Service",
    "ServiceCategory",
    "ServiceType",
    "User",
    "UserSession",
]
