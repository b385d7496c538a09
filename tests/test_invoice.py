import copy

from sqlmodel import select

from pcforge.models.events import TrackingFile
from pcforge.models.orders import OrderItem
from pcforge.services import invoice
from pcforge.services.checkout import CheckoutRequest, place_order
from pcforge.services.storage import get_storage

from .conftest import CHECKOUT


def test_checkout_stores_invoice(session, order):
    rows = session.exec(select(TrackingFile).where(TrackingFile.order_id == order.id)).all()
    assert len(rows) == 1
    assert rows[0].file_name == f"invoice_{order.id}.pdf"
    assert rows[0].file_url == f"http://testserver/files/invoices/invoice_{order.id}.pdf"
    assert get_storage().read(f"invoices/invoice_{order.id}.pdf").startswith(b"%PDF")


def test_render_invoice(session, order):
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    pdf = invoice.render_invoice(order, items)
    assert pdf.startswith(b"%PDF")
    assert invoice.invoice_number(order) == f"INV-{order.order_date:%Y%m%d}-{order.id:05d}"


def test_regenerating_replaces_invoice_row(session, order):
    invoice.store_invoice(session, order)
    invoice.store_invoice(session, order)
    rows = session.exec(select(TrackingFile).where(TrackingFile.order_id == order.id)).all()
    assert len(rows) == 1
    assert len(invoice.list_invoices(session)) == 1


def test_markup_characters_in_customer_text(session):
    payload = copy.deepcopy(CHECKOUT)
    payload["contact"]["name"] = "Tom <Jerry> & Co"
    payload["shipping"]["address"] = "Flat 3 <B>, Lake & Park Road"
    payload["build_type"] = "<i>gaming"
    order = place_order(session, "cust-1", CheckoutRequest(**payload))

    rows = session.exec(select(TrackingFile).where(TrackingFile.order_id == order.id)).all()
    assert len(rows) == 1
    assert get_storage().read(f"invoices/invoice_{order.id}.pdf").startswith(b"%PDF")
    assert invoice.store_invoice(session, order).endswith(f"invoice_{order.id}.pdf")
