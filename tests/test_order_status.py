import pytest
from sqlmodel import select

from pcforge.errors import InvalidTransitionError, TerminalOrderError
from pcforge.models.events import Event
from pcforge.models.orders import Order, OrderUpdate
from pcforge.services import order_status
from pcforge.services.order_status import OrderStatus, next_status
from pcforge.services.session import hub


def test_next_status_walks_the_sequence():
    expected = [
        ("order_received", "components_ordered"),
        ("components_ordered", "components_received"),
        ("components_received", "pc_building"),
        ("pc_building", "pc_testing"),
        ("pc_testing", "shipped"),
        ("shipped", "delivered"),
    ]
    for current, nxt in expected:
        assert next_status(current) == OrderStatus(nxt)


@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
def test_next_status_from_terminal_raises(terminal):
    with pytest.raises(TerminalOrderError):
        next_status(terminal)


def test_unknown_status_is_rejected():
    with pytest.raises(InvalidTransitionError):
        next_status("processing")


def test_can_transition():
    assert order_status.can_transition("order_received", "pc_building")
    assert order_status.can_transition("shipped", "cancelled")
    assert not order_status.can_transition("pc_testing", "pc_building")
    assert not order_status.can_transition("pc_testing", "pc_testing")
    assert not order_status.can_transition("delivered", "cancelled")


def test_every_status_has_a_default_message():
    for status in OrderStatus:
        assert order_status.default_message(status.value)


def test_new_order_has_initial_history(session, order):
    history = order_status.order_history(session, order.id)
    assert [u.status for u in history] == ["order_received"]
    assert history[0].message == order_status.DEFAULT_MESSAGES[OrderStatus.ORDER_RECEIVED]


def test_advance_appends_history_and_updates_status(session, order):
    update = order_status.advance_order(session, order)

    assert update.status == "components_ordered"
    assert update.message == order_status.DEFAULT_MESSAGES[OrderStatus.COMPONENTS_ORDERED]
    assert session.get(Order, order.id).status == "components_ordered"
    history = order_status.order_history(session, order.id)
    assert [u.status for u in history] == ["order_received", "components_ordered"]
    events = session.exec(select(Event).where(Event.event_type == "ORDER_STATUS_CHANGED")).all()
    assert len(events) == 1


def test_custom_message_is_kept(session, order):
    update = order_status.advance_order(session, order, "Parts sourced from two vendors.")
    assert update.message == "Parts sourced from two vendors."


def test_full_lifecycle_then_terminal(session, order):
    for _ in range(6):
        order_status.advance_order(session, order)
    assert order.status == "delivered"

    with pytest.raises(TerminalOrderError):
        order_status.advance_order(session, order)
    with pytest.raises(TerminalOrderError):
        order_status.cancel_order(session, order)

    history = order_status.order_history(session, order.id)
    assert len(history) == 7
    assert history[-1].status == order.status


def test_backward_move_is_rejected_and_nothing_written(session, order):
    order_status.transition_order(session, order, "pc_building")
    count = len(session.exec(select(OrderUpdate)).all())

    with pytest.raises(InvalidTransitionError):
        order_status.transition_order(session, order, "components_received")

    assert session.get(Order, order.id).status == "pc_building"
    assert len(session.exec(select(OrderUpdate)).all()) == count


def test_cancel_from_any_open_state(session, order):
    order_status.transition_order(session, order, "shipped")
    update = order_status.cancel_order(session, order)
    assert update.status == "cancelled"
    assert order.status == "cancelled"


def test_failed_commit_leaves_status_and_history_untouched(session, order, monkeypatch):
    def boom():
        raise RuntimeError("database went away")

    monkeypatch.setattr(session, "commit", boom)
    with pytest.raises(RuntimeError):
        order_status.advance_order(session, order)
    monkeypatch.undo()

    assert session.get(Order, order.id).status == "order_received"
    assert len(order_status.order_history(session, order.id)) == 1


def test_transition_publishes_notification(session, order):
    received = []
    token = hub.subscribe("order.status_changed", lambda topic, payload: received.append(payload))

    order_status.advance_order(session, order)
    assert received == [{"order_id": order.id, "tracking_id": order.tracking_id, "status": "components_ordered"}]

    hub.unsubscribe(token)
    order_status.advance_order(session, order)
    assert len(received) == 1
