"""
Authorization policy.

Pure decision functions over the authenticated actor and the target resource.
None of them touch the database or mutate state; they either return or raise
``Unauthenticated`` / ``Forbidden``.
"""
from dataclasses import dataclass
from typing import Optional

from homeservices.core.errors import Forbidden, Unauthenticated
from homeservices.db.models.user import Role


@dataclass(frozen=True)
class Actor:
    """The identity carried by a verified access token."""

    user_id: int
    email: str
    role: Role


def require_authenticated(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise Unauthenticated()
    return actor


def require_role(actor: Optional[Actor], *roles: Role) -> Actor:
    actor = require_authenticated(actor)
    if actor.role not in roles:
        names = " or ".join(r.value for r in roles)
        raise Forbidden(f"{names.capitalize()} privileges required")
    return actor


def require_ownership(actor: Optional[Actor], owner_id: Optional[int], message: Optional[str] = None) -> Actor:
    # admin-seeded services have no owner, so nobody owns them
    actor = require_authenticated(actor)
    if owner_id is None or actor.user_id != owner_id:
        raise Forbidden(message)
    return actor


def booking_owner_partner_id(booking) -> Optional[int]:
    """The partner who owns a booking, derived through its service."""
    service = booking.service
    return service.provider_id if service is not None else None
