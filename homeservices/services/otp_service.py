"""
One-time email codes.

Used for signup email verification and, with the customer as recipient, for
the booking completion handshake. Codes are bcrypt-hashed at rest, live for
``otp_expiry_minutes`` and are single use; issuing a new code deletes every
earlier code for the same user.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from homeservices.core.config import Settings
from homeservices.core.errors import (
    AlreadyVerified,
    DeliveryFailed,
    InvalidOtp,
    NoVerificationRequest,
    OtpExpired,
    UserNotFound,
)
from homeservices.db.base import utcnow
from homeservices.db.models.email_verification import EmailVerificationToken
from homeservices.db.models.user import User
from homeservices.services.notification import OtpSender

logger = logging.getLogger(__name__)


def generate_otp(length: int = 6) -> str:
    """Uniform numeric code in [10**(length-1), 10**length - 1]."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


class OtpService:
    def __init__(
        self,
        db: Session,
        sender: OtpSender,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
        code_generator: Optional[Callable[[], str]] = None,
    ):
        self.db = db
        self.sender = sender
        self.ttl_minutes = settings.otp_expiry_minutes
        self.otp_length = settings.otp_length
        self.clock = clock
        self.code_generator = code_generator or (lambda: generate_otp(self.otp_length))
        self._hasher = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.otp_hash_rounds)

    def _persist_token(self, user: User, otp: str) -> EmailVerificationToken:
        # delete-then-insert commits as one unit
        self.db.query(EmailVerificationToken).filter(
            EmailVerificationToken.user_id == user.id
        ).delete(synchronize_session=False)

        now = self.clock()
        token = EmailVerificationToken(
            user_id=user.id,
            email=user.email,
            otp_hash=self._hasher.hash(otp),
            expires_at=now + timedelta(minutes=self.ttl_minutes),
            attempts=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(token)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return token

    def create_and_send(self, user: User) -> None:
        otp = self.code_generator()
        self._persist_token(user, otp)
        logger.info(f"💾 OTP issued for user {user.id}, expires in {self.ttl_minutes} minutes")

        try:
            self.sender.send_otp_email(user.email, otp, self.ttl_minutes)
        except Exception as e:
            logger.error(f"❌ Failed to send OTP email to {user.email}: {e}")
            raise DeliveryFailed() from e

    def resend(self, email: str) -> None:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise UserNotFound()
        if user.is_email_verified:
            raise AlreadyVerified()
        self.create_and_send(user)

    def latest_token(self, email: str) -> Optional[EmailVerificationToken]:
        return (
            self.db.query(EmailVerificationToken)
            .filter(EmailVerificationToken.email == email)
            .order_by(EmailVerificationToken.created_at.desc(), EmailVerificationToken.id.desc())
            .first()
        )

    def verify(self, email: str, otp: str) -> User:
        record = self.latest_token(email)
        if not record:
            raise NoVerificationRequest()

        now = self.clock()
        if record.expires_at <= now:
            self.db.delete(record)
            self.db.commit()
            logger.info(f"⌛ Expired OTP discarded for user {record.user_id}")
            raise OtpExpired()

        if not self._hasher.verify(otp, record.otp_hash):
            record.attempts += 1
            record.updated_at = now
            self.db.commit()
            logger.warning(f"🚫 Invalid OTP for user {record.user_id} (attempt {record.attempts})")
            raise InvalidOtp()

        user = self.db.query(User).filter(User.id == record.user_id).first()
        if not user:
            raise UserNotFound("User not found after verification")

        user.is_email_verified = True
        self.db.query(EmailVerificationToken).filter(
            EmailVerificationToken.user_id == record.user_id
        ).delete(synchronize_session=False)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"✅ OTP verified for user {user.id}")
        return user
