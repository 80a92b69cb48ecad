import pytest
from sqlmodel import select

from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.services.product_service import (
    FALLBACK_SLUG,
    ProductService,
    discount_percentage,
    generate_slug,
)

from tests.conftest import API


def test_generate_slug_basic():
    assert generate_slug("Hand Painted Pot!!") == "hand-painted-pot"
    assert generate_slug("  Madhubani -- Peacock  ") == "madhubani-peacock"
    assert generate_slug("Canvas 24x36") == "canvas-24x36"


def test_generate_slug_fallback():
    assert generate_slug("") == FALLBACK_SLUG
    assert generate_slug(None) == FALLBACK_SLUG
    assert generate_slug(42) == FALLBACK_SLUG
    assert generate_slug("!!! ???") == FALLBACK_SLUG


def test_generate_slug_idempotent():
    for name in ["Hand Painted Pot!!", "Wall Hanging (Large)", "", "Ünïcode Pot", "a--b"]:
        once = generate_slug(name)
        assert generate_slug(once) == once


def test_discount_percentage():
    assert discount_percentage(750, 1000) == 25
    assert discount_percentage(500, None) == 0
    assert discount_percentage(0, 100) == 0
    # halves round up
    assert discount_percentage(35, 40) == 13
    assert discount_percentage(99, 200) == 51


def test_list_and_filters(client, make_product):
    make_product("Sunset Canvas", category="Canvas", is_featured=True)
    make_product("Blue Pot", category="Pots")

    res = client.get(f"{API}/products", params={"category": "Canvas"})
    assert res.status_code == 200
    assert [p["name"] for p in res.json()] == ["Sunset Canvas"]

    res = client.get(f"{API}/products/featured")
    assert [p["slug"] for p in res.json()] == ["sunset-canvas"]


def test_product_images_never_null(client, make_product):
    make_product("Bare Pot", images=None)
    res = client.get(f"{API}/products/slug/bare-pot")
    assert res.status_code == 200
    assert res.json()["images"] == []


def test_get_by_slug_falls_back_to_id(client, make_product):
    product = make_product("Peacock Portrait")

    res = client.get(f"{API}/products/slug/peacock-portrait")
    assert res.status_code == 200
    assert res.json()["id"] == str(product.id)
    assert res.json()["reviews"] == []

    res = client.get(f"{API}/products/slug/{product.id}")
    assert res.status_code == 200
    assert res.json()["slug"] == "peacock-portrait"

    assert client.get(f"{API}/products/slug/nope").status_code == 404


def test_high_discount_sorted(client, make_product):
    make_product("Small Discount", price=900, original_price=1000)
    make_product("Big Discount", price=500, original_price=1000)
    make_product("No Discount", price=800)

    res = client.get(f"{API}/products/discounts")
    body = res.json()
    assert [p["name"] for p in body] == ["Big Discount", "Small Discount"]
    assert [p["discount_percentage"] for p in body] == [50, 10]


def test_search_is_case_insensitive(client, make_product):
    make_product("Terracotta Lamp", description="Hand made in Khurja")
    make_product("Blue Pot")

    res = client.get(f"{API}/products/search", params={"q": "KHURJA"})
    assert [p["name"] for p in res.json()] == ["Terracotta Lamp"]


def test_admin_create_makes_slug_unique(client, login, admin):
    login(admin)
    payload = {"name": "Hand Painted Pot!!", "price": 450}

    first = client.post(f"{API}/products", json=payload)
    second = client.post(f"{API}/products", json=payload)

    assert first.status_code == 201
    assert first.json()["slug"] == "hand-painted-pot"
    assert second.json()["slug"] == "hand-painted-pot-2"


def test_admin_rename_rederives_slug(client, login, admin, make_product):
    product = make_product("Old Name")
    login(admin)

    res = client.patch(f"{API}/products/{product.id}", json={"name": "New Name"})
    assert res.status_code == 200
    assert res.json()["slug"] == "new-name"


@pytest.mark.parametrize("field", ["name", "price", "is_featured", "sold_out"])
def test_admin_update_rejects_null_for_required_field(client, login, admin, make_product, field):
    product = make_product("Blue Pot")
    login(admin)

    res = client.patch(f"{API}/products/{product.id}", json={field: None})
    assert res.status_code == 422
    assert client.get(f"{API}/products/{product.id}").json()["name"] == "Blue Pot"


def test_create_requires_admin(client, login, customer):
    login(customer)
    res = client.post(f"{API}/products", json={"name": "x", "price": 1})
    assert res.status_code == 403


def test_repair_slugs_missing_only(session, make_product):
    make_product("Empty Slug Pot", slug="")
    make_product("Stale Slug Pot", slug="legacy-link")
    service = ProductService(ProductRepository(), ReviewRepository())

    report = service.repair_slugs(session, "missing")

    assert report.fixed_count == 1
    assert report.total_products == 2
    assert report.fixed_products[0].new_slug == "empty-slug-pot"
    slugs = {p.name: p.slug for p in session.exec(select(Product)).all()}
    assert slugs["Stale Slug Pot"] == "legacy-link"


def test_repair_slugs_all_keeps_uniqueness(session, make_product):
    make_product("Blue Pot", slug="blue-pot")
    make_product("Blue Pot", slug="BLUE POT old")
    make_product("Blue Pot", slug="blue-pot-2")
    service = ProductService(ProductRepository(), ReviewRepository())

    report = service.repair_slugs(session, "all")

    assert report.fixed_count == 1
    assert report.fixed_products[0].new_slug == "blue-pot-3"
    slugs = [p.slug for p in session.exec(select(Product)).all()]
    assert len(slugs) == len(set(slugs))

    # second run has nothing left to do
    assert service.repair_slugs(session, "all").fixed_count == 0


def test_fix_slugs_endpoint(client, login, admin, customer, make_product):
    make_product("Needs Slug", slug="")

    login(customer)
    assert client.get(f"{API}/maintenance/fix-slugs").status_code == 403

    login(admin)
    res = client.get(f"{API}/maintenance/fix-slugs", params={"mode": "missing"})
    assert res.status_code == 200
    assert res.json()["fixed_count"] == 1
    assert res.json()["success"] is True

    assert client.get(f"{API}/maintenance/fix-slugs", params={"mode": "bogus"}).status_code == 422
