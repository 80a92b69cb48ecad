# storefront/services/product_service.py
import logging
import math
import re
import uuid
from datetime import datetime, timezone
from typing import Iterable

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.storage_utils import (
    PRODUCT_BUCKET,
    generate_object_path,
    upload_to_storage,
    validate_image,
)
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product import (
    ProductCreate,
    ProductDetailRead,
    ProductDiscountRead,
    ProductRead,
    ProductUpdate,
    SlugFix,
    SlugRepairReport,
)
from storefront.schemas.review import ReviewRead

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "unnamed-product"

MAX_PRODUCT_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

PRODUCT_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}


def generate_slug(name: str | None) -> str:
    """
    URL-friendly slug from a product name.

      - lowercase
      - every run of non [a-z0-9] -> '-'
      - strip leading/trailing '-'

    Empty, missing or non-string names (and names with no letters or
    digits at all) give "unnamed-product". Idempotent.
    """
    if not name or not isinstance(name, str):
        return FALLBACK_SLUG

    value = re.sub(r"[^a-z0-9]+", "-", name.lower())
    value = value.strip("-")
    return value or FALLBACK_SLUG


def discount_percentage(price: float, original_price: float | None) -> int:
    if not original_price or not price:
        return 0
    # half up, not banker's rounding
    return math.floor((original_price - price) / original_price * 100 + 0.5)


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - slug generation & uniqueness on every write
      - catalog queries (filters, featured, latest, discounts, search)
      - product detail with reviews (slug, then id fallback)
      - slug repair for rows written before the invariant was enforced
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository, review_repo: ReviewRepository):
        self.repo = repo
        self.review_repo = review_repo

    # ----- Helpers -----

    def _ensure_unique_slug(
        self,
        session: Session,
        base_slug: str,
        product_id: uuid.UUID | None = None,
    ) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.

        A product never collides with itself (product_id).
        """
        slug = base_slug
        i = 2
        while True:
            existing = self.repo.get_by_slug(session, slug)
            if existing is None or existing.id == product_id:
                return slug
            slug = f"{base_slug}-{i}"
            i += 1

    def _to_detail(self, session: Session, product: Product) -> ProductDetailRead:
        reviews = self.review_repo.list_for_product(session, product.id)
        detail = ProductDetailRead.model_validate(product, from_attributes=True)
        detail.reviews = [
            ReviewRead.model_validate(r, from_attributes=True) for r in reviews
        ]
        return detail

    # ----- Catalog queries -----

    def list_products(
        self,
        session: Session,
        category: str | None = None,
        featured: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        return self.repo.list_products(
            session, category=category, featured=featured, skip=skip, limit=limit
        )

    def featured_products(self, session: Session, limit: int = 6) -> list[Product]:
        return self.repo.list_products(session, featured=True, limit=limit)

    def latest_products(self, session: Session, limit: int = 8) -> list[Product]:
        return self.repo.list_products(session, limit=limit)

    def high_discount_products(
        self,
        session: Session,
        limit: int = 8,
    ) -> list[ProductDiscountRead]:
        """
        Products that have an original_price, sorted by discount (highest first).
        """
        products = self.repo.list_discounted(session)
        ranked = [
            ProductDiscountRead(
                **ProductRead.model_validate(p, from_attributes=True).model_dump(),
                discount_percentage=discount_percentage(p.price, p.original_price),
            )
            for p in products
        ]
        ranked.sort(key=lambda p: p.discount_percentage, reverse=True)
        return ranked[:limit]

    def search_products(
        self,
        session: Session,
        query: str,
        limit: int = 20,
    ) -> list[Product]:
        query = query.strip()
        if not query:
            return []
        return self.repo.search(session, query, limit=limit)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def get_product_detail(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> ProductDetailRead:
        return self._to_detail(session, self.get_product(session, product_id))

    def get_product_by_slug(self, session: Session, slug: str) -> ProductDetailRead:
        """
        Look a product up by slug; if nothing matches and the value is a
        UUID, try it as a product id (old links used ids).
        """
        product = self.repo.get_by_slug(session, slug)
        if product is None:
            try:
                product = self.repo.get_by_id(session, uuid.UUID(slug))
            except ValueError:
                product = None

        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return self._to_detail(session, product)

    # ----- Admin writes -----

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
    ) -> Product:
        """
        Create a new product with a unique slug.

        - If slug is provided => normalize & ensure unique.
        - Else => derive from name & ensure unique.
        """
        base_slug = generate_slug(payload.slug or payload.name)
        slug = self._ensure_unique_slug(session, base_slug)

        product = Product(
            **payload.model_dump(exclude={"slug"}),
            slug=slug,
        )
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.

        - An explicit slug is normalized and made unique.
        - A rename without an explicit slug re-derives the slug from the
          new name.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True, exclude={"slug"})

        for field, value in changes.items():
            setattr(product, field, value)

        if payload.slug is not None:
            base_slug = generate_slug(payload.slug)
        elif payload.name is not None:
            base_slug = generate_slug(payload.name)
        else:
            base_slug = None

        if base_slug is not None and base_slug != product.slug:
            product.slug = self._ensure_unique_slug(session, base_slug, product.id)

        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)

    def add_images(
        self,
        session: Session,
        product_id: uuid.UUID,
        files: Iterable[tuple[str, bytes]],
    ) -> Product:
        """
        Upload one or more images and append their URLs to product.images.

        Args:
            files: iterable of (content_type, file_bytes)
        """
        product = self.get_product(session, product_id)
        urls = list(product.images or [])

        for content_type, file_bytes in files:
            ext = validate_image(
                content_type,
                file_bytes,
                MAX_PRODUCT_IMAGE_BYTES,
                PRODUCT_IMAGE_TYPES,
            )
            path = generate_object_path(str(product.id), ext)
            urls.append(upload_to_storage(PRODUCT_BUCKET, path, file_bytes, content_type))

        product.images = urls
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    # ----- Slug repair -----

    def repair_slugs(self, session: Session, mode: str = "missing") -> SlugRepairReport:
        """
        Bring stored slugs back in line with generate_slug(name).

        mode:
          - "missing": only fill empty slugs (existing links keep working)
          - "all": also rewrite slugs that differ from generate_slug(name)

        Uniqueness is preserved with the usual -2, -3 suffixes.
        """
        if mode not in {"missing", "all"}:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="mode must be 'missing' or 'all'",
            )

        products = self.repo.list_all(session)
        fixed: list[SlugFix] = []

        for product in products:
            current = (product.slug or "").strip()
            expected = generate_slug(product.name)

            if current and (mode == "missing" or current == expected):
                continue
            if current and current.startswith(f"{expected}-"):
                # Already a de-duplicated variant of the expected slug
                suffix = current[len(expected) + 1 :]
                if suffix.isdigit():
                    continue

            new_slug = self._ensure_unique_slug(session, expected, product.id)
            if new_slug == current:
                continue

            logger.info(
                "Fixing slug for product %s: %r -> %r", product.id, current, new_slug
            )
            fixed.append(SlugFix(id=product.id, old_slug=product.slug, new_slug=new_slug))
            product.slug = new_slug
            product.updated_at = datetime.now(timezone.utc)
            self.repo.update(session, product)

        return SlugRepairReport(
            message=f"Fixed {len(fixed)} products out of {len(products)} total products.",
            fixed_count=len(fixed),
            total_products=len(products),
            fixed_products=fixed,
        )
