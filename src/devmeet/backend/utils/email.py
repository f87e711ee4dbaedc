"""Email notification service"""
import asyncio
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from ..config import Settings, settings as default_settings
from ..exceptions import UpstreamUnavailableError
from ..logger import get_logger

logger = get_logger(__name__)


class EmailService:
    """Outbound notification sender

    Delivers passcodes, welcome messages and password reset links over
    SMTP. Every ``send_*`` coroutine raises ``UpstreamUnavailableError``
    when delivery fails; callers decide whether that is fatal.
    """

    def __init__(self, config: Settings | None = None):
        self.config = config or default_settings

    @property
    def is_configured(self) -> bool:
        return bool(self.config.smtp_user and self.config.smtp_password)

    def _send(self, to_email: str, subject: str, body: str) -> None:
        """Send a plain-text email (blocking)

        Raises:
            UpstreamUnavailableError: SMTP not configured or send failed
        """
        if not self.is_configured:
            raise UpstreamUnavailableError("SMTP configuration incomplete")

        msg = MIMEMultipart()
        msg["From"] = f"{self.config.smtp_from_name} <{self.config.smtp_from}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain", "utf-8"))

        try:
            with smtplib.SMTP(
                self.config.smtp_host,
                self.config.smtp_port,
            ) as server:
                server.starttls()
                server.login(self.config.smtp_user, self.config.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise UpstreamUnavailableError("Failed to send email") from e

        logger.info(f"Email '{subject}' sent to {to_email}")

    async def send_passcode(self, to_email: str, code: str, name: str | None) -> None:
        """Send email verification passcode"""
        body = f"""
Hi {name or 'there'},

Welcome to {self.config.app_name}! Your verification code is: {code}

The code will expire in {self.config.otp_expire_minutes} minutes.

If you didn't request this, please ignore this email.

---
{self.config.app_name} Team
        """.strip()
        await asyncio.to_thread(
            self._send, to_email, f"{self.config.app_name} - Verify Your Email", body
        )

    async def send_welcome(self, to_email: str, name: str | None) -> None:
        """Send welcome email after successful verification"""
        body = f"""
Hi {name or 'there'},

Your email has been successfully verified! You're now part of the
{self.config.app_name} community.

What's next?
- Complete your profile with skills you want to learn and teach
- Get matched with developers who complement your skill set
- Start collaborating

Get started: {self.config.frontend_url}

---
{self.config.app_name} Team
        """.strip()
        await asyncio.to_thread(
            self._send, to_email, f"Welcome to {self.config.app_name}!", body
        )

    def reset_url(self, token: str) -> str:
        return f"{self.config.frontend_url}/reset-password/{token}"

    async def send_password_reset(self, to_email: str, token: str, name: str | None) -> None:
        """Send password reset link"""
        body = f"""
Hi {name or 'there'},

We received a request to reset your {self.config.app_name} password.
Open the link below to choose a new one:

{self.reset_url(token)}

This link will expire in {self.config.reset_token_expire_minutes} minutes.
If you didn't request this reset, please ignore this email.

---
{self.config.app_name} Team
        """.strip()
        await asyncio.to_thread(
            self._send, to_email, f"{self.config.app_name} - Password Reset Request", body
        )
