#!/usr/bin/env python3
"""
Transactional Email via Resend

Sends payment/shipping notifications to the customer and to staff through
the Resend HTTP API. Sends raise MailDeliveryError; notify() wraps both
sends and reports the outcome instead of raising.
"""

from html import escape
from typing import List, Optional, Union

import httpx

from lenco_shipping.config.constants import (
    CUSTOMER_EMAIL_SUBJECT,
    RESEND_TIMEOUT_SECONDS,
    STAFF_EMAIL_SUBJECT,
)
from lenco_shipping.config.settings import Settings
from lenco_shipping.core.errors import MailDeliveryError
from lenco_shipping.core.logger import setup_logger
from lenco_shipping.models.notification import NotificationPayload, NotificationResult

logger = setup_logger(__name__)

_BASE_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: %(accent)s; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background-color: #f9f9f9; }
    .details { background-color: white; padding: 15px; margin: 10px 0; border-radius: 5px; }
    .label { font-weight: bold; color: #555; }
    .footer { text-align: center; padding: 20px; color: #777; font-size: 12px; }
    .action { background-color: #FF9800; color: white; padding: 10px; text-align: center; margin: 20px 0; border-radius: 5px; }
"""


def _line(label: str, value: Optional[str]) -> str:
    if not value:
        return ""
    return f'<p><span class="label">{label}:</span> {escape(value)}</p>'


def _section(title: str, body: str) -> str:
    if not body:
        return ""
    return f'<div class="details"><h3>{title}</h3>{body}</div>'


def _page(title: str, accent: str, body: str, footer: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<style>{_BASE_STYLE % {'accent': accent}}</style></head><body>"
        f'<div class="container"><div class="header"><h1>{title}</h1></div>'
        f'<div class="content">{body}</div>'
        f'<div class="footer">{footer}</div></div></body></html>'
    )


def _payer_section(details: NotificationPayload, include_bank_code: bool) -> str:
    payer = details.payer
    if not payer:
        return ""

    bank = ""
    if payer.bank and payer.bank.name:
        bank = payer.bank.name
        if include_bank_code:
            bank = f"{bank} ({payer.bank.code or ''})"

    return _section(
        "Payment Details",
        _line("Account Name", payer.account_name)
        + _line("Account Number", payer.account_number)
        + _line("Bank", bank),
    )


def render_customer_email(details: NotificationPayload) -> str:
    """HTML body of the customer confirmation email."""
    transaction = (
        _line("Transaction Reference", details.transaction_reference)
        + _line("Amount", details.amount)
        + _line("Narration", details.narration)
        + _line("Status", details.status)
    )

    shipping = ""
    if details.waybill:
        shipping = (
            _line("Waybill Number", details.waybill)
            + "<p>You can track your shipment using this waybill number.</p>"
        )

    body = (
        "<p>Dear Customer,</p>"
        "<p>Thank you for your payment! Your order has been confirmed and is being processed.</p>"
        + _section("Transaction Details", transaction)
        + _payer_section(details, include_bank_code=False)
        + _section("Shipping Address", f"<p>{escape(details.shipping_address)}</p>" if details.shipping_address else "")
        + _section("Shipping Information", shipping)
        + "<p>We will notify you once your order has been shipped.</p>"
        "<p>If you have any questions, please contact our support team.</p>"
    )
    footer = (
        "<p>Thank you for choosing Sya Online Trading</p>"
        "<p>This is an automated email. Please do not reply.</p>"
    )
    return _page("Payment Confirmed", "#4CAF50", body, footer)


def render_staff_email(details: NotificationPayload) -> str:
    """HTML body of the staff "ship this order" email."""
    transaction = (
        _line("Transaction Reference", details.transaction_reference)
        + _line("Amount", details.amount)
        + _line("Narration", details.narration)
        + _line("Status", details.status)
        + _line("Customer Email", details.customer_email)
    )

    body = (
        "<p>Dear Team,</p>"
        "<p>A new payment has been received and requires shipping processing.</p>"
        + _section("Transaction Details", transaction)
        + _payer_section(details, include_bank_code=True)
        + _section("Shipping Address", f"<p>{escape(details.shipping_address)}</p>" if details.shipping_address else "")
        + _section("Shipping Information", _line("Waybill Number", details.waybill))
        + '<div class="action"><p><strong>Action Required:</strong> Please process and ship this order.</p></div>'
    )
    footer = "<p>This is an automated notification from Sya Online Trading</p>"
    return _page("New Payment Received", "#2196F3", body, footer)


class MailService:
    """Send notification emails through Resend."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize mail service.

        Args:
            settings: Application settings (API key, sender, staff list)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_key = settings.resend_api_key
        self.from_email = settings.mail_from_email
        self.staff_emails: List[str] = settings.staff_email_list
        self.enabled = bool(self.api_key)
        self.client = httpx.AsyncClient(
            base_url=settings.resend_api_url,
            timeout=RESEND_TIMEOUT_SECONDS,
            transport=transport,
        )

        if not self.enabled:
            logger.warning("RESEND_API_KEY not set - emails will not be sent")
        if not self.staff_emails:
            logger.warning("STAFF_EMAILS not set - staff notifications will be skipped")

    async def _send(self, to: Union[str, List[str]], subject: str, html: str) -> None:
        """POST one email to Resend."""
        try:
            response = await self.client.post(
                "/emails",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.from_email,
                    "to": to,
                    "subject": subject,
                    "html": html,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MailDeliveryError(
                f"Resend rejected email: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise MailDeliveryError(f"Error calling Resend: {e}") from e

    async def send_customer_email(self, customer_email: str, details: NotificationPayload) -> bool:
        """
        Send the payment confirmation to a customer.

        Returns:
            True if sent, False if skipped because email is disabled

        Raises:
            MailDeliveryError: Resend call failed
        """
        if not self.enabled:
            logger.warning(f"Email disabled, not sending customer email to {customer_email}")
            return False

        try:
            await self._send(customer_email, CUSTOMER_EMAIL_SUBJECT, render_customer_email(details))
        except MailDeliveryError as e:
            logger.error(f"Error sending customer email: {e}")
            raise

        logger.info(f"Customer email sent to {customer_email}")
        return True

    async def send_staff_email(self, details: NotificationPayload) -> bool:
        """
        Send the "ship this order" notification to every staff address.

        Returns:
            True if sent, False if skipped (no staff configured or email disabled)

        Raises:
            MailDeliveryError: Resend call failed
        """
        if not self.staff_emails:
            logger.warning("No staff emails configured")
            return False

        if not self.enabled:
            logger.warning("Email disabled, not sending staff email")
            return False

        try:
            await self._send(self.staff_emails, STAFF_EMAIL_SUBJECT, render_staff_email(details))
        except MailDeliveryError as e:
            logger.error(f"Error sending staff email: {e}")
            raise

        logger.info(f"Staff email sent to {', '.join(self.staff_emails)}")
        return True

    async def notify(
        self,
        customer_email: Optional[str],
        details: NotificationPayload,
    ) -> NotificationResult:
        """
        Send the customer email (when an address is known) and always the staff email.

        Never raises: any failure of either send, not only MailDeliveryError,
        is logged and recorded on the returned NotificationResult.
        """
        result = NotificationResult()

        if customer_email:
            try:
                result.customer_sent = await self.send_customer_email(customer_email, details)
            except Exception as e:
                logger.error(f"Customer email to {customer_email} failed: {e!r}")
                result.errors.append(f"customer: {e}")

        staff_details = details.model_copy(update={"customer_email": customer_email})
        try:
            result.staff_sent = await self.send_staff_email(staff_details)
        except Exception as e:
            logger.error(f"Staff email failed: {e!r}")
            result.errors.append(f"staff: {e}")

        return result

    async def close(self) -> None:
        """Close HTTP client connection."""
        await self.client.aclose()
