import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from storefront.models.order import Order, OrderItem
from storefront.repositories.order_repo import OrderRepository
from storefront.services.order_service import SHIPPING_COST, compute_total

from tests.conftest import API


def checkout_payload(items, **overrides):
    checkout = {
        "customer_name": "Asha Rao",
        "customer_phone": "9876543210",
        "shipping_address_line1": "12 MG Road",
        "shipping_city": "Pune",
        "shipping_state": "Maharashtra",
        "shipping_pincode": "411001",
        "payment_method": "cod",
    }
    checkout.update(overrides)
    return {"checkout": checkout, "items": items}


@pytest.mark.parametrize(
    "subtotal,shipping,expected",
    [(0, 0, 0), (1200.5, 0, 1200.5), (999, 49, 1048)],
)
def test_compute_total(subtotal, shipping, expected):
    assert compute_total(subtotal, shipping) == expected


def test_compute_total_rejects_negative():
    with pytest.raises(ValueError):
        compute_total(-1, 0)


def test_guest_order_is_priced_server_side(client, session, make_product):
    pot = make_product("Blue Pot", price=450)
    canvas = make_product("Sunset Canvas", price=1200)

    res = client.post(
        f"{API}/orders",
        json=checkout_payload(
            [
                {"product_id": str(pot.id), "quantity": 2},
                {"product_id": str(canvas.id), "quantity": 1},
            ]
        ),
    )

    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "Processing"
    assert body["user_id"] is None
    assert body["subtotal"] == 2100
    assert body["shipping_cost"] == SHIPPING_COST
    assert body["total_amount"] == body["subtotal"] + body["shipping_cost"]
    assert {i["product_name"] for i in body["items"]} == {"Blue Pot", "Sunset Canvas"}

    # price snapshot does not follow later price changes
    pot.price = 999
    session.add(pot)
    session.commit()
    items = session.exec(select(OrderItem).where(OrderItem.product_id == pot.id)).all()
    assert [i.price_at_purchase for i in items] == [450]


def test_signed_in_order_is_linked(client, login, customer, make_product):
    pot = make_product()
    login(customer)

    res = client.post(
        f"{API}/orders",
        json=checkout_payload([{"product_id": str(pot.id), "quantity": 1}]),
    )
    assert res.status_code == 201
    assert res.json()["user_id"] == customer.id

    mine = client.get(f"{API}/orders/me").json()
    assert [o["id"] for o in mine] == [res.json()["id"]]


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("customer_name", "   ", "Customer name is required"),
        ("customer_phone", "98765", "Please enter a valid 10-digit phone number"),
        ("customer_phone", "98765432101", "Please enter a valid 10-digit phone number"),
        ("customer_phone", "98765abcde", "Please enter a valid 10-digit phone number"),
        ("customer_phone", "\u0669\u0668\u0667\u0666\u0665\u0664\u0663\u0662\u0661\u0660", "Please enter a valid 10-digit phone number"),
        ("shipping_pincode", "4110", "Please enter a valid 6-digit pincode"),
        ("shipping_pincode", "4110012", "Please enter a valid 6-digit pincode"),
        ("shipping_pincode", "\u0664\u0661\u0661\u0660\u0660\u0661", "Please enter a valid 6-digit pincode"),
        ("payment_method", "card", "Only Cash on Delivery is currently available"),
    ],
)
def test_checkout_validation(client, session, make_product, field, value, message):
    pot = make_product()
    res = client.post(
        f"{API}/orders",
        json=checkout_payload(
            [{"product_id": str(pot.id), "quantity": 1}], **{field: value}
        ),
    )
    assert res.status_code == 400
    assert res.json()["detail"] == message
    assert session.exec(select(Order)).all() == []


def test_empty_cart_rejected(client):
    res = client.post(f"{API}/orders", json=checkout_payload([]))
    assert res.status_code == 400
    assert res.json()["detail"] == "Cart is empty"


def test_sold_out_product_rejected(client, make_product):
    pot = make_product(sold_out=True)
    res = client.post(
        f"{API}/orders",
        json=checkout_payload([{"product_id": str(pot.id), "quantity": 1}]),
    )
    assert res.status_code == 400
    assert res.json()["detail"]["items"][0]["reason"] == "Product is sold out"


def test_failed_items_leave_no_order(client, session, make_product, monkeypatch):
    pot = make_product()

    def broken_create_items(self, session, items):
        raise SQLAlchemyError("insert into order_items failed")

    monkeypatch.setattr(OrderRepository, "create_items", broken_create_items)

    res = client.post(
        f"{API}/orders",
        json=checkout_payload([{"product_id": str(pot.id), "quantity": 1}]),
    )

    assert res.status_code == 500
    assert res.json()["detail"].startswith("Failed to create order items")
    assert session.exec(select(Order)).all() == []


def test_committed_order_is_deleted_when_items_fail(client, session, make_product, monkeypatch):
    pot = make_product()

    def commit_then_fail(self, session, items):
        session.commit()
        raise SQLAlchemyError("violates foreign key constraint")

    monkeypatch.setattr(OrderRepository, "create_items", commit_then_fail)

    res = client.post(
        f"{API}/orders",
        json=checkout_payload([{"product_id": str(pot.id), "quantity": 1}]),
    )

    assert res.status_code == 500
    assert "Invalid product data" in res.json()["detail"]
    assert session.exec(select(Order)).all() == []


def place(client, product, **overrides):
    res = client.post(
        f"{API}/orders",
        json=checkout_payload([{"product_id": str(product.id), "quantity": 1}], **overrides),
    )
    assert res.status_code == 201
    return res.json()


def test_order_visibility(client, login, customer, other_customer, admin, make_product):
    pot = make_product()
    login(customer)
    order = place(client, pot)

    login(other_customer)
    assert client.get(f"{API}/orders/{order['id']}").status_code == 404

    login(admin)
    assert client.get(f"{API}/orders/{order['id']}").status_code == 200

    login(None)
    guest_order = place(client, pot)
    assert client.get(f"{API}/orders/{guest_order['id']}").status_code == 200


def test_cancel_only_while_processing(client, login, customer, admin, make_product):
    pot = make_product()
    login(customer)
    order = place(client, pot)

    res = client.post(f"{API}/orders/{order['id']}/cancel", json={"reason": "Ordered twice"})
    assert res.status_code == 200
    assert res.json()["status"] == "Cancelled"
    assert res.json()["cancellation_reason"] == "Ordered twice"

    res = client.post(f"{API}/orders/{order['id']}/cancel", json={"reason": "again"})
    assert res.status_code == 400


def test_admin_status_transitions(client, login, customer, admin, make_product):
    pot = make_product()
    login(customer)
    order = place(client, pot)
    url = f"{API}/orders/{order['id']}/status"

    login(customer)
    assert client.patch(url, json={"status": "Shipped"}).status_code == 403

    login(admin)
    assert client.patch(url, json={"status": "Delivered"}).status_code == 400
    assert client.patch(url, json={"status": "Shipped"}).json()["status"] == "Shipped"
    assert client.patch(url, json={"status": "Delivered"}).json()["status"] == "Delivered"
    assert client.patch(url, json={"status": "Cancelled"}).status_code == 400


def test_orders_by_phone_admin_only(client, login, customer, admin, make_product):
    pot = make_product()
    place(client, pot, customer_phone="9000000001")
    place(client, pot, customer_phone="9000000002")

    login(customer)
    assert client.get(f"{API}/orders/by-phone/9000000001").status_code == 403

    login(admin)
    res = client.get(f"{API}/orders/by-phone/9000000001")
    assert res.status_code == 200
    assert [o["customer_phone"] for o in res.json()] == ["9000000001"]


def test_cart_quote(client, make_product):
    pot = make_product("Blue Pot", price=450)
    res = client.post(
        f"{API}/cart/quote",
        json={"items": [{"product_id": str(pot.id), "quantity": 3}]},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["items"][0]["line_total"] == 1350
    assert body["subtotal"] == 1350
    assert body["total_amount"] == body["subtotal"] + body["shipping_cost"]


def test_cart_quote_rejects_bad_quantity(client, make_product):
    pot = make_product()
    res = client.post(
        f"{API}/cart/quote",
        json={"items": [{"product_id": str(pot.id), "quantity": 0}]},
    )
    assert res.status_code == 422
