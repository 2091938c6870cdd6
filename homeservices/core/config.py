import logging
import os
import re
import warnings
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent.parent / ".env"

INSECURE_DEV_SECRET = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only
PRODUCTION_MIN_HASH_ROUNDS = 12

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """Parse "3600", "30m", "1h" or "7d" into a timedelta."""
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration value: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def parse_bool(value: Optional[str]) -> bool:
    if not value:
        return False
    return value.strip().lower() in ("true", "1", "yes", "y")


@dataclass(frozen=True)
class EmailSettings:
    host: str = ""
    port: int = 587
    secure: bool = False
    user: str = ""
    password: str = field(default="", repr=False)
    from_address: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.user and self.password and self.from_address)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed to services."""

    database_url: str = "sqlite:///./homeservices.db"
    jwt_secret: str = field(default=INSECURE_DEV_SECRET, repr=False)
    jwt_algorithm: str = "HS256"
    access_token_expiry: timedelta = timedelta(hours=1)
    refresh_token_expiry: timedelta = timedelta(days=7)

    password_hash_rounds: int = 12
    otp_hash_rounds: int = 10
    otp_length: int = 6
    otp_expiry_minutes: int = 10

    environment: str = "development"
    app_name: str = "Home Service App"
    log_level: str = "INFO"
    cors_origins: tuple = ("http://localhost:3000", "http://localhost:8081", "http://localhost:19006")

    email: EmailSettings = EmailSettings()

    supabase_url: str = ""
    supabase_service_key: str = field(default="", repr=False)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def identity_provider_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(dotenv_path=env_path)

        environment = os.getenv("ENVIRONMENT", "development")

        # Security - CRITICAL: No default secret key in production
        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            if environment.lower() == "production":
                raise RuntimeError("Missing required environment variable: JWT_SECRET")
            warnings.warn(
                "JWT_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION",
                RuntimeWarning,
                stacklevel=2,
            )
            jwt_secret = INSECURE_DEV_SECRET

        password_hash_rounds = int(os.getenv("PASSWORD_HASH_ROUNDS", "12"))
        if environment.lower() == "production" and password_hash_rounds < PRODUCTION_MIN_HASH_ROUNDS:
            raise RuntimeError(
                f"PASSWORD_HASH_ROUNDS must be at least {PRODUCTION_MIN_HASH_ROUNDS} in production"
            )

        smtp_port_raw = os.getenv("SMTP_PORT")
        smtp_port = 587
        if smtp_port_raw:
            try:
                smtp_port = int(smtp_port_raw)
            except ValueError as e:
                raise ValueError("Invalid SMTP_PORT value. It must be a number.") from e

        cors_raw = os.getenv("CORS_ORIGINS")
        cors_origins = (
            tuple(o.strip() for o in cors_raw.split(",") if o.strip())
            if cors_raw
            else cls.cors_origins
        )

        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            jwt_secret=jwt_secret,
            access_token_expiry=parse_duration(os.getenv("ACCESS_TOKEN_EXPIRY", "1h")),
            refresh_token_expiry=parse_duration(os.getenv("REFRESH_TOKEN_EXPIRY", "7d")),
            password_hash_rounds=password_hash_rounds,
            otp_hash_rounds=int(os.getenv("OTP_HASH_ROUNDS", "10")),
            otp_expiry_minutes=int(os.getenv("OTP_EXPIRY_MINUTES", "10")),
            environment=environment,
            app_name=os.getenv("APP_NAME", cls.app_name),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=cors_origins,
            email=EmailSettings(
                host=os.getenv("SMTP_HOST", ""),
                port=smtp_port,
                secure=parse_bool(os.getenv("SMTP_SECURE")),
                user=os.getenv("SMTP_USER", ""),
                password=os.getenv("SMTP_PASS", ""),
                from_address=os.getenv("EMAIL_FROM", ""),
            ),
            supabase_url=os.getenv("SUPABASE_URL", "").rstrip("/"),
            supabase_service_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
        )


@lru_cache
def get_settings() -> Settings:
    settings = Settings.from_env()
    logger.info(f"Loaded settings for environment={settings.environment}")
    return settings
