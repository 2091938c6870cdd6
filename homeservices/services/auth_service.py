import logging
from dataclasses import dataclass
from datetime import timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from homeservices.core.errors import (
    DeliveryFailed,
    EmailAlreadyExists,
    InvalidCredentials,
    InvalidOrExpiredToken,
    UserNotFound,
)
from homeservices.core.policy import Actor
from homeservices.core.security import REFRESH, PasswordHasher, TokenPair, TokenService, hash_token
from homeservices.db.base import utcnow
from homeservices.db.models.user import Role, User, UserSession
from homeservices.services.identity import IdentityProvider
from homeservices.services.otp_service import OtpService

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    tokens: TokenPair
    verification_email_sent: Optional[bool] = None


class AuthService:
    def __init__(
        self,
        db: Session,
        tokens: TokenService,
        hasher: PasswordHasher,
        identity: IdentityProvider,
        otp: OtpService,
    ):
        self.db = db
        self.tokens = tokens
        self.hasher = hasher
        self.identity = identity
        self.otp = otp

    def _issue(self, user: User) -> TokenPair:
        return self.tokens.issue_token_pair(user.id, user.email, user.role)

    def register(self, email: str, password: str, full_name: str) -> AuthResult:
        existing = self.db.query(User).filter(User.email == email).first()
        if existing:
            raise EmailAlreadyExists()

        external_uid = self.identity.create_user(email, password, full_name)

        user = User(
            external_uid=external_uid,
            email=email,
            password_hash=self.hasher.hash(password),
            full_name=full_name,
            role=Role.USER,
            is_email_verified=False,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            # lost a race against a concurrent registration for the same email
            self.db.rollback()
            raise EmailAlreadyExists() from e
        self.db.refresh(user)
        logger.info(f"👤 Registered user {user.id} ({user.email})")

        sent = True
        try:
            self.otp.create_and_send(user)
        except DeliveryFailed:
            sent = False
            logger.warning(f"⚠️ Verification email not delivered to {user.email}; client may resend")

        return AuthResult(user=user, tokens=self._issue(user), verification_email_sent=sent)

    def login(self, email: str, password: str) -> AuthResult:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            logger.info(f"🔒 Login failed for unknown email {email}")
            raise InvalidCredentials()

        if user.password_hash:
            if not self.hasher.verify(password, user.password_hash):
                logger.info(f"🔒 Login failed for {email}: bad password")
                raise InvalidCredentials()
        else:
            # legacy/SSO account: fall back to the identity provider
            uid = self.identity.sign_in(email, password)
            if not uid or uid != user.external_uid:
                logger.info(f"🔒 Login failed for {email}: no local hash and no identity match")
                raise InvalidCredentials()
            user.password_hash = self.hasher.hash(password)

        user.last_login = utcnow()
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"🔓 User {user.id} logged in")
        return AuthResult(user=user, tokens=self._issue(user))

    def refresh(self, refresh_token: str) -> AuthResult:
        payload = self.tokens.verify(refresh_token, expected_type=REFRESH)
        user = self.db.query(User).filter(User.id == payload.user_id).first()
        if not user:
            raise InvalidOrExpiredToken()
        return AuthResult(user=user, tokens=self._issue(user))

    def verify_email(self, email: str, otp: str) -> AuthResult:
        user = self.otp.verify(email, otp)
        return AuthResult(user=user, tokens=self._issue(user))

    def resend_email_otp(self, email: str) -> None:
        self.otp.resend(email)

    def logout(self, actor: Actor, access_token: str) -> None:
        payload = self.tokens.verify(access_token)
        session = UserSession(
            user_id=actor.user_id,
            token_hash=hash_token(access_token),
            expires_at=payload.expires_at.astimezone(timezone.utc).replace(tzinfo=None),
            is_valid=False,
        )
        self.db.add(session)
        self.db.commit()
        logger.info(f"👋 User {actor.user_id} logged out")

    def is_revoked(self, access_token: str) -> bool:
        return (
            self.db.query(UserSession)
            .filter(UserSession.token_hash == hash_token(access_token), UserSession.is_valid.is_(False))
            .first()
            is not None
        )

    def profile(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound()
        return user
