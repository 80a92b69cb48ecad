from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.services.review_service import MAX_REVIEWS_PER_PRODUCT, ReviewService

from tests.conftest import API


def post_review(client, product, **fields):
    payload = {"rating": 5, "comment": "Lovely colours"}
    payload.update(fields)
    return client.post(f"{API}/products/{product.id}/reviews", json=payload)


def test_eleventh_review_is_rejected(client, login, customer, make_product):
    pot = make_product()
    login(customer)

    for _ in range(MAX_REVIEWS_PER_PRODUCT):
        assert post_review(client, pot).status_code == 201

    res = post_review(client, pot)
    assert res.status_code == 400
    assert "maximum limit of 10 reviews" in res.json()["detail"]

    count = client.get(f"{API}/products/{pot.id}/reviews/count").json()
    assert count == {"count": 10, "remaining": 0}


def test_cap_is_per_user_and_product(client, login, customer, other_customer, make_product):
    pot = make_product("Blue Pot")
    canvas = make_product("Sunset Canvas")
    login(customer)
    for _ in range(MAX_REVIEWS_PER_PRODUCT):
        post_review(client, pot)

    assert post_review(client, canvas).status_code == 201
    login(other_customer)
    assert post_review(client, pot).status_code == 201


def test_eligibility(session, customer, make_product):
    pot = make_product()
    service = ReviewService(ReviewRepository(), ProductRepository())

    assert service.check_eligibility(session, None, pot.id).reason == "User ID is required"
    assert service.check_eligibility(session, customer.id, None).reason == "Product ID is required"

    result = service.check_eligibility(session, customer.id, pot.id)
    assert result.can_review is True
    assert result.count == 0
    assert result.remaining == 10


def test_author_name_defaults_to_display_name(client, login, customer, make_product):
    pot = make_product()
    login(customer)

    assert post_review(client, pot).json()["author_name"] == "Asha Rao"
    assert post_review(client, pot, author_name="A.R.").json()["author_name"] == "A.R."


def test_review_payload_validation(client, login, customer, make_product):
    pot = make_product()
    login(customer)

    assert post_review(client, pot, rating=0).status_code == 422
    assert post_review(client, pot, rating=6).status_code == 422
    assert post_review(client, pot, comment="x" * 1001).status_code == 422
    assert post_review(client, pot, image_urls=["not a url"]).status_code == 422
    too_many = [f"https://cdn.example.com/{i}.jpg" for i in range(6)]
    assert post_review(client, pot, image_urls=too_many).status_code == 422


def test_review_on_missing_product(client, login, customer):
    login(customer)
    res = client.post(
        f"{API}/products/00000000-0000-0000-0000-000000000000/reviews",
        json={"rating": 4},
    )
    assert res.status_code == 404


def test_only_author_or_admin_can_edit(client, login, customer, other_customer, admin, make_product):
    pot = make_product()
    login(customer)
    review = post_review(client, pot).json()
    url = f"{API}/reviews/{review['id']}"

    login(other_customer)
    assert client.put(url, json={"rating": 1}).status_code == 403
    assert client.delete(url).status_code == 403

    login(customer)
    res = client.put(url, json={"rating": 3, "comment": "Colours faded"})
    assert res.status_code == 200
    assert res.json()["rating"] == 3

    login(admin)
    assert client.delete(url).status_code == 204
    assert client.get(f"{API}/products/{pot.id}/reviews").json() == []


def test_rating_summary_rounds(client, login, customer, make_product):
    pot = make_product()
    login(customer)
    for rating in (5, 4, 4):
        post_review(client, pot, rating=rating)

    res = client.get(f"{API}/products/{pot.id}/reviews/summary")
    assert res.json() == {"average": 4.3, "count": 3}


def test_product_detail_embeds_reviews(client, login, customer, make_product):
    pot = make_product("Blue Pot")
    login(customer)
    post_review(client, pot)

    res = client.get(f"{API}/products/slug/blue-pot")
    assert len(res.json()["reviews"]) == 1


def test_upload_requires_storage(client, login, customer, monkeypatch):
    login(customer)
    monkeypatch.setattr(
        "storefront.core.supabase_client.supabase_admin", lambda: None
    )
    res = client.post(
        f"{API}/reviews/images",
        files=[("files", ("a.png", b"\x89PNG", "image/png"))],
    )
    assert res.status_code == 503


def test_upload_rejects_wrong_type(client, login, customer):
    login(customer)
    res = client.post(
        f"{API}/reviews/images",
        files=[("files", ("a.gif", b"GIF89a", "image/gif"))],
    )
    assert res.status_code == 400
