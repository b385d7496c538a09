import random
import re

from pcforge.services import order_status
from pcforge.services.tracking import find_by_tracking_code, generate_tracking_code, new_tracking_code


def test_code_format():
    for _ in range(50):
        assert re.match(r"^NB-\d{6}$", generate_tracking_code())


def test_custom_prefix_is_upper_cased():
    code = generate_tracking_code("pcf", rng=random.Random(7))
    assert re.match(r"^PCF-\d{6}$", code)


def test_new_code_avoids_existing(session, order, monkeypatch):
    codes = iter([order.tracking_id, order.tracking_id, "NB-123456"])
    monkeypatch.setattr("pcforge.services.tracking.generate_tracking_code", lambda prefix=None: next(codes))
    assert new_tracking_code(session) == "NB-123456"


def test_unknown_code_is_not_found(session):
    result = find_by_tracking_code(session, "NXB-2311-12345")
    assert not result.found
    assert result.to_dict() == {"tracking_id": "NXB-2311-12345", "found": False}


def test_lookup_returns_order_and_history(session, order):
    order_status.advance_order(session, order, "Parts ordered.")

    result = find_by_tracking_code(session, "  " + order.tracking_id.lower() + " ")

    assert result.found
    body = result.to_dict()
    assert body["status"] == "components_ordered"
    assert body["status_label"] == "Components Ordered"
    assert body["customer_name"] == "Asha Rao"
    assert [u["status"] for u in body["updates"]] == ["order_received", "components_ordered"]
    assert body["updates"][-1]["message"] == "Parts ordered."
