# pcforge/services/invoice.py
"""
PDF invoices.

The invoice is rendered in memory, written to file storage as
``invoices/invoice_<order id>.pdf`` and recorded in TrackingFile; an order
keeps a single invoice row, replaced on regeneration.
"""

import io
import logging
from datetime import datetime
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlmodel import Session, select

from ..models.events import TrackingFile
from ..models.orders import Order, OrderItem
from .event_logger import log_event
from .pricing import estimate_weight
from .storage import get_storage

logger = logging.getLogger(__name__)

COMPANY = "PCForge"
TAGLINE = "CUSTOM PC BUILDERS"
ACCENT = colors.HexColor("#8B5CF6")


def invoice_number(order: Order) -> str:
    return f"INV-{order.order_date:%Y%m%d}-{order.id:05d}"


def _money(amount: int) -> str:
    # reportlab's base fonts have no rupee glyph
    return f"Rs. {amount:,}"


def render_invoice(order: Order, items: List[OrderItem]) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title="PC Build Invoice",
        subject="Custom PC Build Invoice",
        creator=f"{COMPANY} Invoice Generator",
    )
    styles = getSampleStyleSheet()
    story = [
        Paragraph(f"<font color='#8B5CF6'>{COMPANY}</font>", styles["Title"]),
        Paragraph(TAGLINE, styles["Heading4"]),
        Spacer(1, 6 * mm),
        Paragraph(f"INVOICE #{invoice_number(order)}", styles["Heading2"]),
        Paragraph(f"DATE: {datetime.utcnow():%d %b %Y}", styles["Normal"]),
        Paragraph(f"TRACKING ID: {escape(order.tracking_id)}", styles["Normal"]),
    ]
    if order.build_type:
        story.append(Paragraph(f"{escape(order.build_type.upper())} PC BUILD", styles["Heading3"]))

    story += [Spacer(1, 4 * mm), Paragraph("CUSTOMER DETAILS", styles["Heading3"])]
    story.append(Paragraph(f"Name: {escape(order.customer_name)}", styles["Normal"]))
    story.append(Paragraph(f"Email: {escape(order.customer_email)}", styles["Normal"]))
    if order.customer_phone:
        story.append(Paragraph(f"Phone: {escape(order.customer_phone)}", styles["Normal"]))
    if order.shipping_address:
        story.append(Paragraph(f"Address: {escape(order.shipping_address)}", styles["Normal"]))

    rows = [["Category", "Component", "Qty", "Unit price", "Total"]]
    for i in items:
        rows.append([i.category, Paragraph(escape(i.component_name), styles["BodyText"]), str(i.quantity),
                     _money(i.unit_price), _money(i.total_price)])
    table = Table(rows, colWidths=[28 * mm, 80 * mm, 12 * mm, 27 * mm, 27 * mm], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), ACCENT),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story += [Spacer(1, 6 * mm), table, Spacer(1, 6 * mm)]

    selection = {i.category: i.component_id or i.component_name for i in items}
    charges = Table([
        ["Components", _money(order.component_cost)],
        ["Build charge", _money(order.build_charge)],
        ["Shipping", _money(order.shipping_charge)],
        ["GST (18%)", _money(order.gst_amount)],
        ["TOTAL", _money(order.grand_total)],
        ["Estimated weight", f"{estimate_weight(selection):.1f} kg"],
    ], colWidths=[50 * mm, 40 * mm], hAlign="RIGHT")
    charges.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, 4), (-1, 4), 1, ACCENT),
        ("FONTNAME", (0, 4), (-1, 4), "Helvetica-Bold"),
    ]))
    story.append(charges)
    story += [Spacer(1, 8 * mm), Paragraph("Thank you for building with us.", styles["Italic"])]

    doc.build(story)
    return buf.getvalue()


def store_invoice(session: Session, order: Order) -> str:
    """Render, store and record the invoice; returns its public URL."""
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    pdf = render_invoice(order, items)

    file_name = f"invoice_{order.id}.pdf"
    url = get_storage().save(f"invoices/{file_name}", pdf)

    old = session.exec(
        select(TrackingFile).where(
            TrackingFile.order_id == order.id,
            TrackingFile.file_type == "invoice",
        )
    ).all()
    for row in old:
        session.delete(row)
    session.add(TrackingFile(order_id=order.id, file_name=file_name, file_type="invoice", file_url=url))
    log_event(session, "INVOICE_STORED", f"Invoice {file_name} stored for order {order.tracking_id}")
    session.commit()
    return url


def list_invoices(session: Session) -> List[TrackingFile]:
    return session.exec(
        select(TrackingFile)
        .where(TrackingFile.file_type == "invoice")
        .order_by(TrackingFile.created_at.desc())
    ).all()
