import base64
import json
from datetime import datetime, timezone

import pytest
from sqlmodel import select
from svix.webhooks import Webhook

from storefront.core.config import get_settings
from storefront.models.order import Order
from storefront.models.user import User

SECRET = "whsec_" + base64.b64encode(b"storefront-webhook-test-key").decode()

CLERK_URL = "/api/webhooks/clerk"
SUPABASE_URL = "/api/webhooks/supabase"


@pytest.fixture
def clerk_secret(monkeypatch):
    monkeypatch.setattr(get_settings(), "CLERK_WEBHOOK_SECRET", SECRET)
    return SECRET


def signed(event, msg_id: str = "msg_1"):
    body = json.dumps(event)
    now = datetime.now(timezone.utc)
    signature = Webhook(SECRET).sign(msg_id, now, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": str(int(now.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }
    return body, headers


def clerk_user(user_id="user_2abc", first_name="Meera"):
    return {
        "id": user_id,
        "first_name": first_name,
        "last_name": "Iyer",
        "image_url": "https://img.clerk.com/meera.png",
        "primary_email_address_id": "idn_2",
        "email_addresses": [
            {"id": "idn_1", "email_address": "old@example.com"},
            {"id": "idn_2", "email_address": "meera@example.com"},
        ],
    }


def test_user_created_and_updated(client, session, clerk_secret):
    body, headers = signed({"type": "user.created", "data": clerk_user()})
    res = client.post(CLERK_URL, content=body, headers=headers)
    assert res.status_code == 200
    assert res.json() == {"received": True}

    user = session.get(User, "user_2abc")
    assert user.email == "meera@example.com"
    assert user.role == "user"

    body, headers = signed(
        {"type": "user.updated", "data": clerk_user(first_name="Meeru")}, "msg_2"
    )
    client.post(CLERK_URL, content=body, headers=headers)
    session.expire_all()
    assert session.get(User, "user_2abc").first_name == "Meeru"


def test_user_update_keeps_role(client, session, clerk_secret):
    session.add(User(id="user_2abc", email="meera@example.com", role="admin"))
    session.commit()

    body, headers = signed({"type": "user.updated", "data": clerk_user()})
    client.post(CLERK_URL, content=body, headers=headers)

    session.expire_all()
    assert session.get(User, "user_2abc").role == "admin"


def test_user_deleted_flags_orders(client, session, clerk_secret):
    session.add(User(id="user_2abc", email="meera@example.com"))
    session.add(
        Order(
            user_id="user_2abc",
            customer_name="Meera",
            customer_phone="9876543210",
            shipping_address_line1="1 Lake Road",
            shipping_city="Kochi",
            shipping_state="Kerala",
            shipping_pincode="682001",
            subtotal=100,
            total_amount=100,
        )
    )
    session.commit()

    body, headers = signed({"type": "user.deleted", "data": {"id": "user_2abc", "deleted": True}})
    res = client.post(CLERK_URL, content=body, headers=headers)

    assert res.status_code == 200
    session.expire_all()
    assert session.get(User, "user_2abc") is None
    orders = session.exec(select(Order)).all()
    assert [o.deleted for o in orders] == [True]


def test_unknown_event_is_acknowledged(client, clerk_secret):
    body, headers = signed({"type": "session.created", "data": {"id": "sess_1"}})
    assert client.post(CLERK_URL, content=body, headers=headers).status_code == 200


def test_missing_svix_headers(client, clerk_secret):
    body, headers = signed({"type": "user.created", "data": clerk_user()})
    del headers["svix-signature"]
    res = client.post(CLERK_URL, content=body, headers=headers)
    assert res.status_code == 400


def test_tampered_body_rejected(client, session, clerk_secret):
    body, headers = signed({"type": "user.created", "data": clerk_user()})
    tampered = body.replace("Meera", "Mallory")
    res = client.post(CLERK_URL, content=tampered, headers=headers)
    assert res.status_code == 400
    assert session.get(User, "user_2abc") is None


def test_no_secret_configured(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "CLERK_WEBHOOK_SECRET", None)
    body, headers = signed({"type": "user.created", "data": clerk_user()})
    assert client.post(CLERK_URL, content=body, headers=headers).status_code == 503


def test_supabase_webhook_without_secret(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "SUPABASE_WEBHOOK_SECRET", None)
    for event_type in ("ORDER_CREATED", "PAYMENT_COMPLETED", "SOMETHING_ELSE"):
        res = client.post(SUPABASE_URL, json={"type": event_type, "record": {"id": "1"}})
        assert res.status_code == 200
        assert res.json() == {"received": True}


def test_supabase_webhook_secret(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "SUPABASE_WEBHOOK_SECRET", "s3cret")
    payload = {"type": "ORDER_CREATED", "record": {"id": "1"}}

    assert client.post(SUPABASE_URL, json=payload).status_code == 401
    assert (
        client.post(SUPABASE_URL, json=payload, headers={"Authorization": "Bearer nope"}).status_code
        == 401
    )
    res = client.post(SUPABASE_URL, json=payload, headers={"Authorization": "Bearer s3cret"})
    assert res.status_code == 200


def test_supabase_webhook_bad_payload(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "SUPABASE_WEBHOOK_SECRET", None)
    res = client.post(SUPABASE_URL, content=b"not json")
    assert res.status_code == 500
    assert res.json() == {"error": "Webhook processing failed"}


def test_user_event_without_id_is_acknowledged(client, session, clerk_secret):
    body, headers = signed({"type": "user.updated", "data": {"first_name": "Nobody"}}, msg_id="msg_noid")
    res = client.post(CLERK_URL, content=body, headers=headers)
    assert res.status_code == 200
    assert session.exec(select(User)).all() == []


def test_signed_non_object_payload_rejected(client, clerk_secret):
    body, headers = signed(["user.created"], msg_id="msg_list")
    res = client.post(CLERK_URL, content=body, headers=headers)
    assert res.status_code == 400
