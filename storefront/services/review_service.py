# storefront/services/review_service.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.storage_utils import (
    REVIEW_BUCKET,
    generate_object_path,
    upload_to_storage,
    validate_image,
)
from storefront.models.review import Review
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import (
    MAX_REVIEW_IMAGES,
    RatingSummary,
    ReviewCount,
    ReviewCreate,
    ReviewEligibility,
    ReviewUpdate,
    UploadedImages,
)

logger = logging.getLogger(__name__)

MAX_REVIEWS_PER_PRODUCT = 10

MAX_REVIEW_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

REVIEW_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}


class ReviewService:
    """
    Business logic for product reviews.

    Rules:
      - a user may post at most MAX_REVIEWS_PER_PRODUCT reviews per product
      - only the author or an admin may edit or delete a review
    """

    def __init__(self, repo: ReviewRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def check_eligibility(
        self,
        session: Session,
        user_id: str | None,
        product_id: uuid.UUID | None,
    ) -> ReviewEligibility:
        if not user_id:
            return ReviewEligibility(
                can_review=False, reason="User ID is required", count=0, remaining=0
            )
        if not product_id:
            return ReviewEligibility(
                can_review=False, reason="Product ID is required", count=0, remaining=0
            )
        if self.product_repo.get_by_id(session, product_id) is None:
            return ReviewEligibility(
                can_review=False, reason="Product not found", count=0, remaining=0
            )

        count = self.repo.count_for_user_product(session, user_id, product_id)
        remaining = max(0, MAX_REVIEWS_PER_PRODUCT - count)
        if remaining == 0:
            return ReviewEligibility(
                can_review=False,
                reason=(
                    f"You have reached the maximum limit of {MAX_REVIEWS_PER_PRODUCT} "
                    "reviews for this product."
                ),
                count=count,
                remaining=0,
            )
        return ReviewEligibility(can_review=True, count=count, remaining=remaining)

    def add_review(
        self,
        session: Session,
        product_id: uuid.UUID,
        user: User,
        payload: ReviewCreate,
    ) -> Review:
        eligibility = self.check_eligibility(session, user.id, product_id)
        if not eligibility.can_review:
            code = (
                status.HTTP_404_NOT_FOUND
                if eligibility.reason == "Product not found"
                else status.HTTP_400_BAD_REQUEST
            )
            raise HTTPException(status_code=code, detail=eligibility.reason)

        author_name = (payload.author_name or "").strip() or user.display_name
        review = Review(
            product_id=product_id,
            user_id=user.id,
            author_name=author_name,
            rating=payload.rating,
            comment=payload.comment,
            image_urls=payload.image_urls or None,
        )
        review = self.repo.create(session, review)
        logger.info("Review %s added for product %s by %s", review.id, product_id, user.id)
        return review

    def _get_editable(self, session: Session, review_id: uuid.UUID, user: User) -> Review:
        review = self.repo.get_by_id(session, review_id)
        if not review:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Review not found",
            )
        if review.user_id != user.id and user.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not authorized to edit this review",
            )
        return review

    def update_review(
        self,
        session: Session,
        review_id: uuid.UUID,
        user: User,
        payload: ReviewUpdate,
    ) -> Review:
        review = self._get_editable(session, review_id, user)
        review.rating = payload.rating
        review.comment = payload.comment
        review.image_urls = payload.image_urls or None
        review.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, review)

    def delete_review(self, session: Session, review_id: uuid.UUID, user: User) -> None:
        review = self._get_editable(session, review_id, user)
        self.repo.delete(session, review)

    def list_product_reviews(self, session: Session, product_id: uuid.UUID) -> list[Review]:
        return self.repo.list_for_product(session, product_id)

    def rating_summary(self, session: Session, product_id: uuid.UUID) -> RatingSummary:
        average, count = self.repo.rating_summary(session, product_id)
        return RatingSummary(average=round(average, 1) if count else 0.0, count=count)

    def count_for_user(
        self,
        session: Session,
        user_id: str,
        product_id: uuid.UUID,
    ) -> ReviewCount:
        count = self.repo.count_for_user_product(session, user_id, product_id)
        return ReviewCount(count=count, remaining=max(0, MAX_REVIEWS_PER_PRODUCT - count))

    def list_user_reviews(
        self,
        session: Session,
        user_id: str,
        product_id: uuid.UUID | None = None,
    ) -> list[Review]:
        return self.repo.list_for_user(session, user_id, product_id)

    def upload_images(
        self,
        user: User,
        files: Iterable[tuple[str, bytes]],
    ) -> UploadedImages:
        """
        Store review photos and return their public URLs.

        Args:
            files: iterable of (content_type, file_bytes)
        """
        files = list(files)
        if not files:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No files provided",
            )
        if len(files) > MAX_REVIEW_IMAGES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum {MAX_REVIEW_IMAGES} images allowed",
            )

        # Validate everything before the first upload
        extensions = [
            validate_image(ct, data, MAX_REVIEW_IMAGE_BYTES, REVIEW_IMAGE_TYPES)
            for ct, data in files
        ]

        urls = []
        for (content_type, data), ext in zip(files, extensions):
            path = generate_object_path(user.id, ext)
            urls.append(upload_to_storage(REVIEW_BUCKET, path, data, content_type))
        return UploadedImages(urls=urls)
