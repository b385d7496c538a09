import pytest
from sqlmodel import select

from pcforge.errors import NotFoundError, QuotationAlreadyDecided
from pcforge.models.orders import Order, OrderItem
from pcforge.models.vendors import ComponentQuotation, VendorOrder, VendorStats
from pcforge.services import quotations
from pcforge.services.order_status import order_history
from pcforge.services.session import hub


def _items(session, order):
    return session.exec(select(OrderItem).where(OrderItem.order_id == order.id).order_by(OrderItem.id)).all()


@pytest.fixture(name="quoted")
def quoted_fixture(session, vendors, order):
    """ven-1 quotes the processor and graphics card lines."""
    cpu, gpu = _items(session, order)[:2]
    quotations.submit_component_quote(session, "ven-1", order.id, cpu.id, 9000)
    quotations.submit_component_quote(session, "ven-1", order.id, gpu.id, 18000, quantity=2)
    return order


def test_quotation_price_is_sum_of_component_quotes(session, quoted):
    q = quotations.find_quotation(session, "ven-1", quoted.id)
    assert q.status == quotations.PENDING
    assert q.price == 9000 + 18000 * 2
    assert quotations.aggregate_price(session, "ven-1", quoted.id) == q.price


def test_requote_replaces_line_price(session, quoted):
    cpu = _items(session, quoted)[0]
    q = quotations.submit_component_quote(session, "ven-1", quoted.id, cpu.id, 8500)
    assert q.price == 8500 + 36000
    rows = session.exec(select(ComponentQuotation).where(ComponentQuotation.vendor_id == "ven-1")).all()
    assert len(rows) == 2


def test_quote_for_unknown_item_or_vendor(session, vendors, order):
    with pytest.raises(NotFoundError):
        quotations.submit_component_quote(session, "ven-1", order.id, 9999, 100)
    item = _items(session, order)[0]
    with pytest.raises(NotFoundError):
        quotations.submit_component_quote(session, "ven-404", order.id, item.id, 100)


def test_accept_marks_everything_and_moves_order(session, quoted):
    events = []
    hub.subscribe("*", lambda topic, payload: events.append(topic))

    q = quotations.record_decision(session, "ven-1", quoted.id, accepted=True)

    assert q.status == quotations.ACCEPTED
    rows = session.exec(select(ComponentQuotation).where(ComponentQuotation.order_id == quoted.id)).all()
    assert rows and all(r.status == quotations.ACCEPTED for r in rows)
    assert session.get(VendorStats, "ven-1").orders_won == 1
    vo = session.exec(select(VendorOrder).where(VendorOrder.vendor_id == "ven-1")).one()
    assert vo.status == quotations.ACCEPTED

    order = session.get(Order, quoted.id)
    assert order.status == "components_ordered"
    assert order_history(session, order.id)[-1].message == quotations.ACCEPTED_ORDER_MESSAGE
    assert "order.status_changed" in events
    assert "quotation.decided" in events


def test_accepting_twice_counts_once(session, quoted):
    quotations.record_decision(session, "ven-1", quoted.id, accepted=True)
    quotations.record_decision(session, "ven-1", quoted.id, accepted=True)

    assert session.get(VendorStats, "ven-1").orders_won == 1
    assert len(order_history(session, quoted.id)) == 2


def test_decision_cannot_be_reversed(session, quoted):
    quotations.record_decision(session, "ven-1", quoted.id, accepted=True)
    with pytest.raises(QuotationAlreadyDecided):
        quotations.record_decision(session, "ven-1", quoted.id, accepted=False)
    assert session.get(VendorStats, "ven-1").orders_lost == 0


def test_quotes_refused_after_decision(session, quoted):
    quotations.record_decision(session, "ven-1", quoted.id, accepted=False)
    item = _items(session, quoted)[2]
    with pytest.raises(QuotationAlreadyDecided):
        quotations.submit_component_quote(session, "ven-1", quoted.id, item.id, 100)


def test_reject_counts_lost_and_leaves_order(session, quoted):
    q = quotations.record_decision(session, "ven-1", quoted.id, accepted=False)
    assert q.status == quotations.REJECTED
    stats = session.get(VendorStats, "ven-1")
    assert (stats.orders_won, stats.orders_lost) == (0, 1)
    assert session.get(Order, quoted.id).status == "order_received"


def test_decision_without_quotation_row_creates_one(session, vendors, order):
    assert quotations.find_quotation(session, "ven-2", order.id) is None

    q = quotations.record_decision(session, "ven-2", order.id, accepted=True)

    assert q.id is not None
    assert q.price == 0
    assert q.status == quotations.ACCEPTED
    assert quotations.find_quotation(session, "ven-2", order.id).id == q.id


def test_open_orders_exclude_decided(session, quoted):
    assert [o.id for o in quotations.open_orders_for_vendor(session, "ven-2")] == [quoted.id]
    quotations.record_decision(session, "ven-2", quoted.id, accepted=False)
    assert quotations.open_orders_for_vendor(session, "ven-2") == []


def test_vendor_stats_start_at_zero(session, vendors):
    stats = quotations.vendor_stats(session, "ven-2")
    assert (stats.orders_won, stats.orders_lost) == (0, 0)


def test_failed_commit_leaves_decision_unrecorded(session, quoted, monkeypatch):
    def boom():
        raise RuntimeError("database went away")

    monkeypatch.setattr(session, "commit", boom)
    with pytest.raises(RuntimeError):
        quotations.record_decision(session, "ven-1", quoted.id, accepted=True)
    monkeypatch.undo()

    assert quotations.find_quotation(session, "ven-1", quoted.id).status == quotations.PENDING
    rows = session.exec(select(ComponentQuotation).where(ComponentQuotation.order_id == quoted.id)).all()
    assert rows and all(r.status == quotations.PENDING for r in rows)
    assert session.get(VendorStats, "ven-1") is None
    assert session.exec(select(VendorOrder)).all() == []
    assert session.get(Order, quoted.id).status == "order_received"
    assert len(order_history(session, quoted.id)) == 1


def test_synthesized_quotation_sums_component_rows(session, vendors, order):
    cpu, gpu = _items(session, order)[:2]
    session.add_all([
        ComponentQuotation(vendor_id="ven-2", order_id=order.id, order_item_id=cpu.id,
                           component_name=cpu.component_name, quoted_price=1000, quantity=1),
        ComponentQuotation(vendor_id="ven-2", order_id=order.id, order_item_id=gpu.id,
                           component_name=gpu.component_name, quoted_price=2500, quantity=2),
    ])
    session.commit()
    assert quotations.find_quotation(session, "ven-2", order.id) is None

    q = quotations.record_decision(session, "ven-2", order.id, accepted=False)

    assert q.price == 1000 + 2500 * 2
    assert q.status == quotations.REJECTED
    rows = session.exec(select(ComponentQuotation).where(ComponentQuotation.vendor_id == "ven-2")).all()
    assert [r.status for r in rows] == [quotations.REJECTED, quotations.REJECTED]
