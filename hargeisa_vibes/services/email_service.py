"""Email service for booking receipts.

Sends through SendGrid when an API key is configured, otherwise through
SMTP with STARTTLS. SMTP calls are blocking and run in a worker thread.
"""

import asyncio
import logging
import smtplib
from datetime import UTC, date, datetime
from email.message import EmailMessage
from html import escape
from typing import Any

import httpx

from hargeisa_vibes.config import settings
from hargeisa_vibes.models.booking import Booking

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class EmailService:
    """Service for sending transactional email."""

    def __init__(self) -> None:
        """Initialize email service."""
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def smtp_configured(self) -> bool:
        return bool(settings.smtp_user and settings.smtp_password)

    @property
    def from_header(self) -> str:
        address = settings.smtp_user if self.smtp_configured else settings.email_from_address
        return f'"{settings.email_from_name}" <{address}>'

    # ==================== TRANSPORT ====================

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email through the configured transport.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML body
            text_content: Plain text alternative

        Returns:
            bool: True if the transport accepted the message
        """
        if settings.sendgrid_api_key:
            return await self._send_via_sendgrid(to_email, subject, html_content, text_content)
        if not self.smtp_configured:
            logger.warning("No email transport configured; receipt to %s not sent", to_email)
            return False
        try:
            await asyncio.to_thread(
                self._send_via_smtp, to_email, subject, html_content, text_content
            )
        except (smtplib.SMTPException, OSError):
            logger.exception("SMTP delivery to %s failed", to_email)
            return False
        return True

    def _send_via_smtp(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None,
    ) -> None:
        msg = EmailMessage()
        msg["From"] = self.from_header
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text_content or "Please view this message in an HTML capable client.")
        msg.add_alternative(html_content, subtype="html")

        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout) as smtp:
            smtp.starttls()
            smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(msg)

    async def _send_via_sendgrid(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None,
    ) -> bool:
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }
        if text_content:
            payload["content"].insert(0, {"type": "text/plain", "value": text_content})

        try:
            response = await self.http_client.post(
                SENDGRID_URL,
                headers={
                    "Authorization": f"Bearer {settings.sendgrid_api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        except httpx.HTTPError:
            logger.exception("SendGrid request for %s failed", to_email)
            return False
        if response.status_code not in (200, 202):
            logger.warning("SendGrid rejected mail to %s: %s", to_email, response.status_code)
            return False
        return True

    async def verify_connection(self) -> tuple[bool, str]:
        """Check that the SMTP server accepts our credentials."""
        if settings.sendgrid_api_key:
            return True, "SendGrid API key configured"
        if not self.smtp_configured:
            return False, "SMTP_USER and SMTP_PASSWORD are not set"
        try:
            await asyncio.to_thread(self._smtp_login_check)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP verification failed: %s", e)
            return False, f"SMTP verification failed: {e}"
        return True, f"SMTP server {settings.smtp_host}:{settings.smtp_port} is ready"

    def _smtp_login_check(self) -> None:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout) as smtp:
            smtp.starttls()
            smtp.login(settings.smtp_user, settings.smtp_password)

    # ==================== RECEIPTS ====================

    async def send_booking_receipt(self, booking: Booking, service_title: str) -> bool:
        """Email the booking receipt to the customer."""
        subject = f"Booking Confirmation - {service_title}"
        html = render_receipt_html(booking, service_title)
        text = render_receipt_text(booking, service_title)
        sent = await self.send_email(booking.customer_email, subject, html, text)
        if sent:
            logger.info("Receipt for %s sent to %s", booking.id, booking.customer_email)
        return sent


def _format_travel_date(value: date | None) -> str:
    if value is None:
        return "To be confirmed"
    return f"{value:%A, %B} {value.day}, {value.year}"


def _format_booking_date(value: datetime | None) -> str:
    value = value or datetime.now(UTC)
    return f"{value:%B} {value.day}, {value.year} {value:%I:%M %p}"


def _receipt_rows(booking: Booking, service_title: str) -> list[tuple[str, str]]:
    return [
        ("Booking ID", booking.id),
        ("Service", service_title),
        ("Travel Date", _format_travel_date(booking.travel_date)),
        ("Number of People", str(booking.number_of_people)),
        ("Payment Method", booking.payment_method or "Not specified"),
        ("Booking Date", _format_booking_date(booking.booking_date)),
    ]


def render_receipt_text(booking: Booking, service_title: str) -> str:
    lines = [f"Dear {booking.customer_name},", "", "Your Hargeisa Vibes booking is confirmed.", ""]
    lines += [f"{label}: {value}" for label, value in _receipt_rows(booking, service_title)]
    lines += ["", f"Total Amount: ${booking.total_amount:.2f}"]
    return "\n".join(lines)


def render_receipt_html(booking: Booking, service_title: str) -> str:
    rows = "".join(
        f"""
            <tr>
                <td style="padding: 8px 0; font-weight: 600; color: #495057;">{escape(label)}:</td>
                <td style="padding: 8px 0; color: #212529; text-align: right;">{escape(value)}</td>
            </tr>"""
        for label, value in _receipt_rows(booking, service_title)
    )
    return f"""
        <!DOCTYPE html>
        <html lang="en">
        <head>
            <meta charset="utf-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
            <title>Booking Confirmation</title>
        </head>
        <body style="font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
                     max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
            <div style="background: #667eea; color: white; padding: 30px; text-align: center;
                        border-radius: 10px 10px 0 0;">
                <div style="font-size: 28px; font-weight: bold;">Hargeisa Vibes</div>
                <div style="font-size: 16px;">Explore the Beauty of Hargeisa</div>
            </div>
            <div style="background: white; padding: 30px; border-radius: 0 0 10px 10px;">
                <h1 style="color: #28a745; text-align: center;">Booking Confirmed!</h1>
                <p>Dear <strong>{escape(booking.customer_name)}</strong>,</p>
                <p>Thank you for choosing Hargeisa Vibes! Your booking has been received.</p>
                <table style="width: 100%; background: #f8f9fa; padding: 20px; border-radius: 8px;">
                    {rows}
                </table>
                <div style="font-size: 24px; font-weight: bold; color: #28a745; text-align: center;
                            margin: 20px 0; padding: 15px; background: #d4edda; border-radius: 8px;">
                    Total Amount: ${booking.total_amount:.2f}
                </div>
                <p>Questions about your booking? Write to support@hargeisavibes.com.</p>
            </div>
            <p style="color: #9ca3af; font-size: 12px; margin-top: 24px; text-align: center;">
                &copy; {datetime.now(UTC).year} Hargeisa Vibes. All rights reserved.
            </p>
        </body>
        </html>
        """


# Singleton instance
email_service = EmailService()
