import json

import httpx

from pcforge.services import notifications
from pcforge.services.notifications import EmailMessage, MailClient


def _mailer(handler):
    return MailClient("https://mail.example.com/send", api_key="k", transport=httpx.MockTransport(handler))


def test_send_posts_payload():
    captured = {}

    def handler(request):
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "msg-1"})

    ok = _mailer(handler).send(EmailMessage("asha@example.com", "Hi", "<p>x</p>", "http://f/inv.pdf"))

    assert ok
    assert captured["auth"] == "Bearer k"
    assert captured["body"] == {
        "to": "asha@example.com",
        "subject": "Hi",
        "body": "<p>x</p>",
        "attachmentUrl": "http://f/inv.pdf",
    }


def test_failures_return_false():
    assert not _mailer(lambda r: httpx.Response(500, text="down")).send(EmailMessage("a@b.co", "s", "b"))
    assert not _mailer(lambda r: httpx.Response(200, json={"error": "quota"})).send(EmailMessage("a@b.co", "s", "b"))

    def unreachable(request):
        raise httpx.ConnectError("refused", request=request)

    assert not _mailer(unreachable).send(EmailMessage("a@b.co", "s", "b"))


def test_missing_recipient_or_endpoint_is_skipped():
    calls = []
    mailer = _mailer(lambda r: calls.append(r) or httpx.Response(200, json={}))
    assert not mailer.send(EmailMessage("", "s", "b"))
    assert not MailClient(None).send(EmailMessage("a@b.co", "s", "b"))
    assert calls == []


def test_order_confirmation_email(session, order):
    sent = []

    def handler(request):
        sent.append(json.loads(request.content))
        return httpx.Response(200, json={})

    notifications.set_mailer(_mailer(handler))
    items = []
    assert notifications.send_order_confirmation(order, items, "http://testserver/files/invoices/x.pdf")

    assert sent[0]["to"] == "asha@example.com"
    assert sent[0]["subject"] == f"Your Order Confirmation #{order.tracking_id} - PCForge"
    assert sent[0]["attachmentUrl"].endswith("x.pdf")
    assert order.tracking_id in sent[0]["body"]
