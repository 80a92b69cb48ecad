# storefront/services/custom_design_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.storage_utils import (
    DESIGN_BUCKET,
    generate_object_path,
    upload_to_storage,
    validate_image,
)
from storefront.models.custom_design import CustomDesignRequest
from storefront.models.product import Category, Product
from storefront.models.user import User
from storefront.repositories.custom_design_repo import CustomDesignRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.custom_design import (
    CustomDesignCreate,
    CustomDesignDetailRead,
    CustomDesignRead,
    CustomDesignStatusUpdate,
)

logger = logging.getLogger(__name__)

MAX_REFERENCE_IMAGE_BYTES = 10 * 1024 * 1024  # 10MB


class CustomDesignService:
    """
    Made-to-order requests: category/product lookup for the intake form,
    submission, customer and admin views, reference image upload.
    """

    def __init__(self, repo: CustomDesignRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    # ----- Intake form data -----

    def list_categories(self, session: Session) -> list[Category]:
        return self.product_repo.list_categories(session, only_active=True)

    def _get_category_or_404(self, session: Session, category_id: str) -> Category:
        category = self.product_repo.get_category(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def list_products_for_category(self, session: Session, category_id: str) -> list[Product]:
        """
        Products linked by category_id; older rows only carry the display
        name in `category`, so fall back to that.
        """
        category = self._get_category_or_404(session, category_id)
        products = self.product_repo.list_by_category_id(session, category.id)
        if not products:
            products = self.product_repo.list_by_category_name(session, category.name)
        return products

    # ----- Requests -----

    def submit(self, session: Session, payload: CustomDesignCreate) -> CustomDesignRequest:
        self._get_category_or_404(session, payload.category_id)
        if payload.product_id and not self.product_repo.get_by_id(session, payload.product_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Selected product does not exist",
            )

        request = CustomDesignRequest(
            **payload.model_dump(exclude={"customer_email"}),
            customer_email=str(payload.customer_email).lower(),
            status="pending",
        )
        request = self.repo.save(session, request)
        logger.info("Custom design request %s submitted", request.id)
        return request

    def list_for_user(self, session: Session, user: User) -> list[CustomDesignRequest]:
        if not user.email:
            return []
        return self.repo.list_for_email(session, user.email.lower())

    def list_all(
        self,
        session: Session,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[CustomDesignRequest]:
        return self.repo.list_all(session, status=status_filter, skip=skip, limit=limit)

    def get_request(
        self, session: Session, request_id: uuid.UUID, user: User
    ) -> CustomDesignDetailRead:
        request = self.repo.get_by_id(session, request_id)
        is_owner = bool(user.email) and request is not None and (
            request.customer_email == user.email.lower()
        )
        if request is None or not (is_owner or user.role == "admin"):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Custom design request not found",
            )

        category = self.product_repo.get_category(session, request.category_id)
        product = (
            self.product_repo.get_by_id(session, request.product_id)
            if request.product_id
            else None
        )
        return CustomDesignDetailRead(
            **CustomDesignRead.model_validate(request, from_attributes=True).model_dump(),
            category_name=category.name if category else None,
            product_name=product.name if product else None,
            product_price=product.price if product else None,
        )

    def update_status(
        self,
        session: Session,
        request_id: uuid.UUID,
        payload: CustomDesignStatusUpdate,
    ) -> CustomDesignRequest:
        request = self.repo.get_by_id(session, request_id)
        if request is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Custom design request not found",
            )

        for field, value in payload.model_dump(exclude_none=True).items():
            setattr(request, field, value)
        request.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, request)

    # ----- Reference images -----

    def upload_reference_image(self, content_type: str, file_bytes: bytes) -> str:
        """
        Store one reference image and return its public URL.
        Any image/* type is accepted.
        """
        ext = validate_image(content_type, file_bytes, MAX_REFERENCE_IMAGE_BYTES)
        path = generate_object_path("requests", ext)
        return upload_to_storage(DESIGN_BUCKET, path, file_bytes, content_type)
