import smtplib

import pytest
from sqlmodel import select

from storefront.core.config import get_settings
from storefront.core.email_client import send_email
from storefront.models.notify import ProductNotifyRequest

from tests.conftest import API


def notify_url(product):
    return f"{API}/products/{product.id}/notify"


def test_notify_request_and_duplicate(client, make_product):
    pot = make_product(sold_out=True)

    res = client.post(notify_url(pot), json={"user_email": "Fan@Example.com"})
    assert res.status_code == 201
    assert res.json()["user_name"] == "fan"
    assert res.json()["notified"] is False

    res = client.post(notify_url(pot), json={"user_email": "fan@example.com"})
    assert res.status_code == 409

    status = client.get(f"{notify_url(pot)}/status", params={"email": "fan@example.com"})
    assert status.json() == {"has_request": True}


def test_send_notifications(client, session, login, admin, make_product, monkeypatch):
    pot = make_product("Blue Pot", sold_out=True)
    client.post(notify_url(pot), json={"user_email": "ok@example.com"})
    client.post(notify_url(pot), json={"user_email": "bounce@example.com"})

    sent = []

    def fake_send(to_email, subject, text_body, html_body=None):
        if to_email.startswith("bounce"):
            raise smtplib.SMTPRecipientsRefused({to_email: (550, b"no such user")})
        sent.append((to_email, subject))

    settings = get_settings()
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(settings, "SMTP_USERNAME", "studio")
    monkeypatch.setattr(settings, "SMTP_PASSWORD", "pw")
    monkeypatch.setattr("storefront.services.notify_service.send_email", fake_send)

    login(admin)
    res = client.post(f"{notify_url(pot)}/send")

    assert res.status_code == 200
    assert res.json() == {"notified_count": 1, "failed_emails": ["bounce@example.com"]}
    assert sent == [("ok@example.com", "Blue Pot is back in stock")]

    pending = client.get(notify_url(pot)).json()
    assert [p["user_email"] for p in pending] == ["bounce@example.com"]

    done = session.exec(
        select(ProductNotifyRequest).where(ProductNotifyRequest.notified == True)  # noqa: E712
    ).all()
    assert done[0].notified_at is not None


def test_send_without_smtp(client, login, admin, make_product, monkeypatch):
    pot = make_product()
    monkeypatch.setattr(get_settings(), "SMTP_HOST", None)
    login(admin)
    assert client.post(f"{notify_url(pot)}/send").status_code == 503


def test_me_and_profile_update(client, login, customer):
    login(customer)

    assert client.get(f"{API}/users/me").json()["email"] == "asha@example.com"

    res = client.patch(f"{API}/users/me", json={"phone": " 9876543210 ", "last_name": "R"})
    assert res.status_code == 200
    assert res.json()["phone"] == "9876543210"
    assert res.json()["last_name"] == "R"

    assert client.patch(f"{API}/users/me", json={"email": "x@y.z"}).status_code == 422


@pytest.mark.parametrize("field", ["first_name", "last_name"])
def test_profile_name_cannot_be_null(client, login, customer, field):
    login(customer)
    res = client.patch(f"{API}/users/me", json={field: None})
    assert res.status_code == 422
    assert client.get(f"{API}/users/me").json()["first_name"] == "Asha"


def test_profile_phone_can_be_cleared(client, login, customer):
    login(customer)
    client.patch(f"{API}/users/me", json={"phone": "9876543210"})
    res = client.patch(f"{API}/users/me", json={"phone": None})
    assert res.status_code == 200
    assert res.json()["phone"] is None


def test_admin_role_change(client, login, admin, customer):
    login(customer)
    assert client.get(f"{API}/users").status_code == 403

    login(admin)
    res = client.patch(f"{API}/users/{customer.id}/role", json={"role": "admin"})
    assert res.status_code == 200
    assert res.json()["role"] == "admin"
    assert client.get(f"{API}/users/user_missing").status_code == 404


def test_guest_gets_401_on_profile(client):
    assert client.get(f"{API}/users/me").status_code == 401


def test_admin_list_filters_by_role(client, login, admin, customer):
    login(admin)
    res = client.get(f"{API}/users", params={"role": "admin"})
    assert [u["id"] for u in res.json()] == [admin.id]


class RejectingSMTP:
    """SMTP connection whose login is refused."""

    instances = []

    def __init__(self, host, port, timeout=None):
        self.closed = False
        self.instances.append(self)

    def starttls(self):
        pass

    def login(self, username, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def close(self):
        self.closed = True


def test_failed_login_closes_connection(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(settings, "SMTP_USERNAME", "studio")
    monkeypatch.setattr(settings, "SMTP_PASSWORD", "wrong")
    monkeypatch.setattr(settings, "SMTP_USE_SSL", False)
    monkeypatch.setattr(RejectingSMTP, "instances", [])
    monkeypatch.setattr("storefront.core.email_client.smtplib.SMTP", RejectingSMTP)

    with pytest.raises(smtplib.SMTPAuthenticationError):
        send_email("fan@example.com", "Hello", "Back in stock")

    assert [conn.closed for conn in RejectingSMTP.instances] == [True]
