import pytest

from tests.conftest import API

ADDRESS = {
    "label": "Home",
    "full_name": "Asha Rao",
    "phone": "9876543210",
    "address_line1": "12 MG Road",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}


def create(client, **overrides):
    payload = {**ADDRESS, **overrides}
    res = client.post(f"{API}/addresses", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def defaults(client):
    return [a["id"] for a in client.get(f"{API}/addresses").json() if a["is_default"]]


def test_first_address_becomes_default(client, login, customer):
    login(customer)
    first = create(client)
    assert first["is_default"] is True
    assert first["country"] == "India"

    second = create(client, label="Work")
    assert second["is_default"] is False
    assert defaults(client) == [first["id"]]


def test_new_default_clears_previous(client, login, customer):
    login(customer)
    first = create(client)
    second = create(client, label="Work", is_default=True)

    assert defaults(client) == [second["id"]]
    assert client.get(f"{API}/addresses/default").json()["id"] == second["id"]

    res = client.post(f"{API}/addresses/{first['id']}/default")
    assert res.status_code == 200
    assert defaults(client) == [first["id"]]


def test_default_listed_first(client, login, customer):
    login(customer)
    create(client)
    work = create(client, label="Work", is_default=True)
    create(client, label="Parents")

    listed = client.get(f"{API}/addresses").json()
    assert listed[0]["id"] == work["id"]


def test_address_ownership(client, login, customer, other_customer):
    login(customer)
    address = create(client)

    login(other_customer)
    assert client.get(f"{API}/addresses/{address['id']}").status_code == 404
    assert client.post(f"{API}/addresses/{address['id']}/default").status_code == 404
    assert client.delete(f"{API}/addresses/{address['id']}").status_code == 404
    assert client.get(f"{API}/addresses/default").status_code == 404


def test_update_and_delete(client, login, customer):
    login(customer)
    address = create(client)

    res = client.patch(f"{API}/addresses/{address['id']}", json={"city": "Mumbai"})
    assert res.json()["city"] == "Mumbai"

    assert client.delete(f"{API}/addresses/{address['id']}").status_code == 204
    assert client.get(f"{API}/addresses").json() == []


def test_address_validation(client, login, customer):
    login(customer)
    assert client.post(f"{API}/addresses", json={**ADDRESS, "pincode": "4110"}).status_code == 422
    assert client.post(f"{API}/addresses", json={**ADDRESS, "phone": "12345"}).status_code == 422
    assert client.post(f"{API}/addresses", json={**ADDRESS, "city": "  "}).status_code == 422
    assert client.post(f"{API}/addresses", json={**ADDRESS, "pincode": "\u0664\u0661\u0661\u0660\u0660\u0661"}).status_code == 422


@pytest.mark.parametrize("field", ["full_name", "label", "address_line1", "city", "state", "pincode", "country"])
def test_update_rejects_null_for_required_field(client, login, customer, field):
    login(customer)
    address = create(client)

    res = client.patch(f"{API}/addresses/{address['id']}", json={field: None})
    assert res.status_code == 422
    assert client.get(f"{API}/addresses/{address['id']}").json()[field] == address[field]


def test_update_allows_clearing_optional_fields(client, login, customer):
    login(customer)
    address = create(client, address_line2="Near the park")

    res = client.patch(f"{API}/addresses/{address['id']}", json={"address_line2": None, "phone": None})
    assert res.status_code == 200
    assert res.json()["address_line2"] is None
    assert res.json()["phone"] is None
