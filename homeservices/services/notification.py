"""
OTP email delivery.

``OtpSender`` is the only capability the verification service needs. The
SMTP implementation builds a MIME message per send; when SMTP is not
configured, ``LoggingOtpSender`` writes the code to the log instead.
"""
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from homeservices.core.config import EmailSettings, Settings

logger = logging.getLogger(__name__)


class OtpSender(Protocol):
    def send_otp_email(self, address: str, code: str, ttl_minutes: int) -> None:
        ...


def otp_email_template(app_name: str, code: str, ttl_minutes: int) -> tuple[str, str, str]:
    subject = f"{app_name} verification code"
    text = f"Your verification code is {code}. It expires in {ttl_minutes} minutes."
    html = f"""
      <div style="font-family: Arial, sans-serif; line-height: 1.6;">
        <p>Hello,</p>
        <p>Your verification code for <strong>{app_name}</strong> is:</p>
        <p style="font-size: 24px; font-weight: bold; letter-spacing: 4px;">{code}</p>
        <p>This code will expire in <strong>{ttl_minutes} minutes</strong>. If you did not request this email, you can safely ignore it.</p>
        <p>Thanks,<br/>The {app_name} Team</p>
      </div>
    """
    return subject, text, html


class SmtpOtpSender:
    def __init__(self, email_settings: EmailSettings, app_name: str, timeout: float = 10.0):
        self.settings = email_settings
        self.app_name = app_name
        self.timeout = timeout
        self._ssl_context = None

    @property
    def ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = ssl.create_default_context()
        return self._ssl_context

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        if s.secure:
            return smtplib.SMTP_SSL(s.host, s.port, timeout=self.timeout, context=self.ssl_context)
        server = smtplib.SMTP(s.host, s.port, timeout=self.timeout)
        try:
            server.starttls(context=self.ssl_context)
        except Exception:
            server.close()
            raise
        return server

    def send_otp_email(self, address: str, code: str, ttl_minutes: int) -> None:
        subject, text, html = otp_email_template(self.app_name, code, ttl_minutes)

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.settings.from_address
        msg["To"] = address
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))

        with self._connect() as server:
            server.login(self.settings.user, self.settings.password)
            server.sendmail(self.settings.from_address, [address], msg.as_string())
        logger.info(f"📧 OTP email sent to {address}")


class LoggingOtpSender:
    def send_otp_email(self, address: str, code: str, ttl_minutes: int) -> None:
        logger.warning("SMTP configuration is missing. Logging OTP instead of sending email.")
        logger.info(f"[Email OTP] recipient={address}, otp={code}, expiresInMinutes={ttl_minutes}")


def build_otp_sender(settings: Settings) -> OtpSender:
    if settings.email.enabled:
        return SmtpOtpSender(settings.email, settings.app_name)
    return LoggingOtpSender()
