import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from homeservices.core.config import Settings
from homeservices.core.errors import InvalidOrExpiredToken
from homeservices.core.policy import Actor
from homeservices.db.models.user import Role

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = max(4, rounds)  # bcrypt's minimum cost
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=self.rounds)

    def hash(self, secret: str) -> str:
        return self._context.hash(secret)

    def verify(self, secret: str, hashed: Optional[str]) -> bool:
        if not hashed:
            return False
        try:
            return self._context.verify(secret, hashed)
        except ValueError:
            # malformed hash in the database
            logger.warning("Refusing to verify against a malformed bcrypt hash")
            return False


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    email: str
    role: Role
    token_type: str
    issued_at: datetime
    expires_at: datetime

    def to_actor(self) -> Actor:
        return Actor(user_id=self.user_id, email=self.email, role=self.role)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.access_expiry = settings.access_token_expiry
        self.refresh_expiry = settings.refresh_token_expiry

    def _encode(self, user_id: int, email: str, role: Role, token_type: str, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "userId": user_id,
            "email": email,
            "role": Role(role).value,
            "typ": token_type,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def issue_access_token(self, user_id: int, email: str, role: Role) -> str:
        return self._encode(user_id, email, role, ACCESS, self.access_expiry)

    def issue_refresh_token(self, user_id: int, email: str, role: Role) -> str:
        return self._encode(user_id, email, role, REFRESH, self.refresh_expiry)

    def issue_token_pair(self, user_id: int, email: str, role: Role) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(user_id, email, role),
            refresh_token=self.issue_refresh_token(user_id, email, role),
        )

    def verify(self, token: str, expected_type: Optional[str] = None) -> TokenPayload:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidOrExpiredToken() from e

        try:
            payload = TokenPayload(
                user_id=int(claims["userId"]),
                email=str(claims["email"]),
                role=Role(claims["role"]),
                token_type=claims.get("typ", ACCESS),
                issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidOrExpiredToken() from e

        if expected_type and payload.token_type != expected_type:
            raise InvalidOrExpiredToken()
        return payload
