"""
FastAPI dependencies: settings, collaborators, services and the current actor.

Tests swap any of these through ``app.dependency_overrides``.
"""
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from homeservices.core.config import Settings, get_settings
from homeservices.core.errors import InvalidOrExpiredToken, Unauthenticated
from homeservices.core.policy import Actor, require_role
from homeservices.core.security import ACCESS, PasswordHasher, TokenService
from homeservices.db.base import get_db
from homeservices.db.models.user import Role
from homeservices.services.address_service import AddressService
from homeservices.services.admin_service import AdminService
from homeservices.services.auth_service import AuthService
from homeservices.services.booking_service import BookingService
from homeservices.services.catalog_service import CatalogService
from homeservices.services.identity import IdentityProvider, build_identity_provider
from homeservices.services.notification import OtpSender, build_otp_sender
from homeservices.services.onboarding_service import OccupationService, ProviderProfileService
from homeservices.services.otp_service import OtpService
from homeservices.services.review_service import ReviewService

bearer = HTTPBearer(auto_error=False)


# Long-lived collaborators, built lazily once per settings
@lru_cache
def _otp_sender(settings: Settings) -> OtpSender:
    return build_otp_sender(settings)


@lru_cache
def _identity_provider(settings: Settings) -> IdentityProvider:
    return build_identity_provider(settings)


def get_otp_sender(settings: Settings = Depends(get_settings)) -> OtpSender:
    return _otp_sender(settings)


def get_identity_provider(settings: Settings = Depends(get_settings)) -> IdentityProvider:
    return _identity_provider(settings)


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(settings)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(settings.password_hash_rounds)


# Per-request services
def get_otp_service(
    db: Session = Depends(get_db),
    sender: OtpSender = Depends(get_otp_sender),
    settings: Settings = Depends(get_settings),
) -> OtpService:
    return OtpService(db, sender, settings)


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    identity: IdentityProvider = Depends(get_identity_provider),
    otp: OtpService = Depends(get_otp_service),
) -> AuthService:
    return AuthService(db, tokens, hasher, identity, otp)


def get_booking_service(
    db: Session = Depends(get_db),
    otp: OtpService = Depends(get_otp_service),
) -> BookingService:
    return BookingService(db, otp)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_occupation_service(db: Session = Depends(get_db)) -> OccupationService:
    return OccupationService(db)


def get_profile_service(db: Session = Depends(get_db)) -> ProviderProfileService:
    return ProviderProfileService(db)


def get_address_service(db: Session = Depends(get_db)) -> AddressService:
    return AddressService(db)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db)


# Authentication
def get_access_token(credentials: HTTPAuthorizationCredentials = Depends(bearer)) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return credentials.credentials


def get_current_actor(
    token: str = Depends(get_access_token),
    tokens: TokenService = Depends(get_token_service),
    auth: AuthService = Depends(get_auth_service),
) -> Actor:
    payload = tokens.verify(token, expected_type=ACCESS)
    if auth.is_revoked(token):
        raise InvalidOrExpiredToken()
    return payload.to_actor()


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    return require_role(actor, Role.ADMIN)


def require_partner(actor: Actor = Depends(get_current_actor)) -> Actor:
    return require_role(actor, Role.PARTNER)
