"""Service for sending emails."""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from restaurant_backend.domain.errors import NotificationError

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_username: str,
        smtp_password: str,
        from_email: str,
        from_name: str = "Restaurant",
        timeout: float = 15.0,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout

    async def send_otp_email(self, to_email: str, code: str, expires_in_minutes: int) -> None:
        """
        Send a password reset code.

        Args:
            to_email: Recipient email
            code: Six digit one-time code
            expires_in_minutes: Lifetime of the code, shown to the reader

        Raises:
            NotificationError: If the SMTP server rejects or cannot be reached
        """
        subject = "Your password reset code"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Password reset</h2>
                <p style="color: #475569; line-height: 1.6;">
                    Use the code below to reset your password:
                </p>
                <div style="font-size: 28px; font-weight: 700; letter-spacing: 4px; margin: 20px 0;">
                    {code}
                </div>
                <p style="color: #64748b; font-size: 14px;">
                    This code expires in {expires_in_minutes} minutes.
                    If you did not ask for a password reset, you can ignore this email.
                </p>
            </body>
        </html>
        """

        text_body = (
            f"Your password reset code is {code}.\n"
            f"It expires in {expires_in_minutes} minutes.\n"
            "If you did not ask for a password reset, you can ignore this email.\n"
        )

        await asyncio.to_thread(self._send_email, to_email, subject, html_body, text_body)

    def build_message(self, to_email: str, subject: str, html_body: str, text_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email

        part1 = MIMEText(text_body, "plain", "utf-8")
        part2 = MIMEText(html_body, "html", "utf-8")

        msg.attach(part1)
        msg.attach(part2)
        return msg

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> None:
        """
        Send an email via SMTP.

        Port 465 uses implicit TLS, every other port upgrades with STARTTLS.
        """
        msg = self.build_message(to_email, subject, html_body, text_body)
        try:
            if self.smtp_port == 465:
                with smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                    server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                    server.starttls()
                    server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to_email, exc)
            raise NotificationError(f"Failed to send email to {to_email}") from exc

        logger.info("Sent email '%s' to %s", subject, to_email)
