from pcforge.services.session import NotificationHub, SessionState


def test_subscribe_publish_unsubscribe():
    hub = NotificationHub()
    seen = []
    token = hub.subscribe("order.created", lambda topic, payload: seen.append((topic, payload)))

    assert hub.publish("order.created", {"order_id": 1}) == 1
    assert hub.publish("order.status_changed", {"order_id": 1}) == 0
    assert seen == [("order.created", {"order_id": 1})]

    assert hub.unsubscribe(token)
    assert not hub.unsubscribe(token)
    assert hub.publish("order.created", {"order_id": 2}) == 0


def test_wildcard_and_failing_listener():
    hub = NotificationHub()
    seen = []

    def broken(topic, payload):
        raise RuntimeError("listener down")

    hub.subscribe("*", lambda topic, payload: seen.append(topic))
    hub.subscribe("quotation.decided", broken)

    assert hub.publish("quotation.decided", {}) == 1
    assert seen == ["quotation.decided"]


def test_admin_flag():
    assert SessionState("a", "admin").is_admin
    assert not SessionState("c", "customer").is_admin
