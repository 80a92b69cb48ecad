# storefront/schemas/review.py
import uuid
from datetime import datetime
from urllib.parse import urlparse

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

MAX_REVIEW_IMAGES = 5
MAX_COMMENT_LENGTH = 1000


def _validate_image_urls(urls: list[str] | None) -> list[str] | None:
    if urls is None:
        return None
    if len(urls) > MAX_REVIEW_IMAGES:
        raise ValueError(f"Maximum {MAX_REVIEW_IMAGES} images allowed")
    for url in urls:
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("Invalid image URL provided")
    return urls


def _normalize_comment(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class ReviewCreate(SQLModel):
    """
    Payload for adding a review.

    - author_name is optional: defaults to the user's display name.
    """

    model_config = ConfigDict(extra="forbid")

    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=MAX_COMMENT_LENGTH)
    image_urls: list[str] | None = None
    author_name: str | None = Field(default=None, max_length=100)

    @field_validator("image_urls")
    @classmethod
    def check_image_urls(cls, v: list[str] | None) -> list[str] | None:
        return _validate_image_urls(v)

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        return _normalize_comment(v)


class ReviewUpdate(SQLModel):
    """
    Full replacement of a review's rating, comment and images.
    """

    model_config = ConfigDict(extra="forbid")

    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=MAX_COMMENT_LENGTH)
    image_urls: list[str] | None = None

    @field_validator("image_urls")
    @classmethod
    def check_image_urls(cls, v: list[str] | None) -> list[str] | None:
        return _validate_image_urls(v)

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        return _normalize_comment(v)


class ReviewRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: str
    author_name: str
    rating: int
    comment: str | None = None
    image_urls: list[str] | None = None
    created_at: datetime


class ReviewEligibility(SQLModel):
    """
    Whether the current user may add another review for a product.
    """

    can_review: bool
    reason: str | None = None
    count: int
    remaining: int


class ReviewCount(SQLModel):
    count: int
    remaining: int


class RatingSummary(SQLModel):
    """
    Average rating (1 decimal) and number of reviews.
    """

    average: float
    count: int


class UploadedImages(SQLModel):
    urls: list[str]
