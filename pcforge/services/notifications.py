# pcforge/services/notifications.py
"""
Customer and vendor e-mails.

Messages are handed to the external mail-sending endpoint as
``{to, subject, body, attachmentUrl}``; delivery happens there. When no
endpoint is configured the message is only logged.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from ..config import settings
from ..models.orders import Order, OrderItem, OrderUpdate
from ..models.vendors import VendorProfile, VendorQuotation
from .order_status import STATUS_LABELS, parse_status

logger = logging.getLogger(__name__)

BRAND = "PCForge"


@dataclass
class EmailMessage:
    recipient: str
    subject: str
    html: str
    attachment_url: Optional[str] = None

    def payload(self) -> dict:
        body = {"to": self.recipient, "subject": self.subject, "body": self.html}
        if self.attachment_url:
            body["attachmentUrl"] = self.attachment_url
        return body


class MailClient:
    """Thin wrapper over the mail endpoint."""

    def __init__(
        self,
        endpoint: Optional[str],
        api_key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = endpoint
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.Client(timeout=settings.http_timeout, headers=headers, transport=transport)

    def send(self, message: EmailMessage) -> bool:
        if not message.recipient:
            logger.warning("Email %r has no recipient; skipped", message.subject)
            return False

        if not self.endpoint:
            logger.info("Mail endpoint not configured; would send %r to %s", message.subject, message.recipient)
            return False

        try:
            response = self.client.post(self.endpoint, json=message.payload())
            response.raise_for_status()
            data = response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            logger.error("Mail endpoint returned HTTP %s: %s", e.response.status_code, e.response.text)
            return False
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Sending email to %s failed: %s", message.recipient, e)
            return False

        if isinstance(data, dict) and data.get("error"):
            logger.error("Mail endpoint reported an error: %s", data["error"])
            return False

        logger.info("Email %r sent to %s", message.subject, message.recipient)
        return True

    def close(self):
        self.client.close()


_mailer: Optional[MailClient] = None


def get_mailer() -> MailClient:
    global _mailer
    if _mailer is None:
        _mailer = MailClient(settings.mail_endpoint, settings.mail_api_key)
    return _mailer


def set_mailer(mailer: Optional[MailClient]) -> None:
    """Swap the global mailer (tests, alternative endpoints)."""
    global _mailer
    _mailer = mailer


def send_email(recipient: str, subject: str, body_html: str, attachment_url: Optional[str] = None) -> bool:
    return get_mailer().send(EmailMessage(recipient, subject, body_html, attachment_url))


# ---------- templates ----------

def _money(amount: int) -> str:
    return f"₹{amount:,}"


def _layout(title: str, content: str) -> str:
    return (
        "<html><body style=\"font-family: Arial, sans-serif; color: #333;\">"
        f"<div style=\"max-width: 600px; margin: 0 auto;\">"
        f"<h1 style=\"background: #8B5CF6; color: #fff; padding: 16px;\">{BRAND}</h1>"
        f"<h2>{html.escape(title)}</h2>{content}"
        f"<p style=\"font-size: 12px; color: #6b7280;\">&copy; {BRAND}. Custom PC builds.</p>"
        "</div></body></html>"
    )


def order_confirmation_html(order: Order, items: List[OrderItem], invoice_url: Optional[str] = None) -> str:
    rows = "".join(
        f"<tr><td>{html.escape(i.component_name)}</td><td>{i.quantity}</td>"
        f"<td>{_money(i.total_price)}</td></tr>"
        for i in items
    )
    invoice = f"<p><a href=\"{html.escape(invoice_url)}\">Download your invoice</a></p>" if invoice_url else ""
    content = (
        f"<p>Hi {html.escape(order.customer_name)},</p>"
        f"<p>Thank you for your order. Your tracking ID is <b>{order.tracking_id}</b>.</p>"
        f"<table><tr><th>Component</th><th>Qty</th><th>Price</th></tr>{rows}</table>"
        f"<p>Build charge: {_money(order.build_charge)}<br>"
        f"Shipping: {_money(order.shipping_charge)}<br>"
        f"GST (18%): {_money(order.gst_amount)}<br>"
        f"<b>Total: {_money(order.grand_total)}</b></p>"
        f"<p>Estimated delivery: {order.estimated_delivery:%d %b %Y}</p>{invoice}"
    )
    return _layout(f"Order confirmation #{order.tracking_id}", content)


def status_update_html(order: Order, update: OrderUpdate) -> str:
    label = STATUS_LABELS[parse_status(update.status)]
    content = (
        f"<p>Hi {html.escape(order.customer_name)},</p>"
        f"<p>Your order <b>{order.tracking_id}</b> is now: <b>{label}</b>.</p>"
        f"<p>{html.escape(update.message)}</p>"
    )
    return _layout(f"Order update: {label}", content)


def quotation_decision_html(vendor: VendorProfile, order: Order, quotation: VendorQuotation) -> str:
    if quotation.status == "accepted":
        text = "Your quotation has been accepted. Please proceed with supplying the components."
    else:
        text = "Your quotation was not selected for this order."
    content = (
        f"<p>Hi {html.escape(vendor.vendor_name)},</p>"
        f"<p>Order #{order.id}, quoted price {_money(quotation.price)}.</p><p>{text}</p>"
    )
    return _layout(f"Quotation {quotation.status}", content)


def send_order_confirmation(order: Order, items: List[OrderItem], invoice_url: Optional[str] = None) -> bool:
    return send_email(
        order.customer_email,
        f"Your Order Confirmation #{order.tracking_id} - {BRAND}",
        order_confirmation_html(order, items, invoice_url),
        invoice_url,
    )


def send_status_update(order: Order, update: OrderUpdate) -> bool:
    label = STATUS_LABELS[parse_status(update.status)]
    return send_email(
        order.customer_email,
        f"Order {order.tracking_id}: {label}",
        status_update_html(order, update),
    )


def send_quotation_decision(vendor: VendorProfile, order: Order, quotation: VendorQuotation) -> bool:
    return send_email(
        vendor.email,
        f"Quotation {quotation.status} for order #{order.id}",
        quotation_decision_html(vendor, order, quotation),
    )
