# storefront/routers/reviews.py
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import (
    RatingSummary,
    ReviewCount,
    ReviewCreate,
    ReviewEligibility,
    ReviewRead,
    ReviewUpdate,
    UploadedImages,
)
from storefront.services.review_service import ReviewService

router = APIRouter(tags=["Reviews"])

repo = ReviewRepository()
product_repo = ProductRepository()
service = ReviewService(repo, product_repo)


# -------- Per-product --------


@router.get("/products/{product_id}/reviews", response_model=list[ReviewRead])
def list_product_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Reviews of a product, newest first (public).
    """
    return service.list_product_reviews(session, product_id)


@router.get("/products/{product_id}/reviews/summary", response_model=RatingSummary)
def rating_summary(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.rating_summary(session, product_id)


@router.get(
    "/products/{product_id}/reviews/eligibility",
    response_model=ReviewEligibility,
)
def review_eligibility(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Whether the current user can post another review for this product.
    """
    return service.check_eligibility(session, current_user.id, product_id)


@router.get("/products/{product_id}/reviews/count", response_model=ReviewCount)
def my_review_count(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.count_for_user(session, current_user.id, product_id)


@router.get("/products/{product_id}/reviews/mine", response_model=list[ReviewRead])
def my_product_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.list_user_reviews(session, current_user.id, product_id)


@router.post(
    "/products/{product_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
def add_review(
    product_id: uuid.UUID,
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a review. At most 10 reviews per user and product.
    """
    return service.add_review(session, product_id, current_user, payload)


# -------- Review owner --------


@router.get("/reviews/me", response_model=list[ReviewRead])
def my_reviews(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.list_user_reviews(session, current_user.id)


@router.post("/reviews/images", response_model=UploadedImages)
def upload_review_images(
    files: list[UploadFile] = File(...),
    current_user: User = Depends(require_auth),
):
    """
    Upload review photos (JPEG, PNG, WEBP; up to 5 files of 5MB each).

    Returns public URLs to pass as `image_urls` when posting the review.
    """
    payload: list[tuple[str, bytes]] = []
    for f in files:
        if not f.content_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing content-type for one of the uploaded files",
            )
        payload.append((f.content_type, f.file.read()))

    return service.upload_images(current_user, payload)


@router.put("/reviews/{review_id}", response_model=ReviewRead)
def update_review(
    review_id: uuid.UUID,
    payload: ReviewUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Edit a review (author or admin).
    """
    return service.update_review(session, review_id, current_user, payload)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.delete_review(session, review_id, current_user)
    return None
