# storefront/routers/products.py
import uuid

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product import (
    ProductCreate,
    ProductDetailRead,
    ProductDiscountRead,
    ProductRead,
    ProductUpdate,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
review_repo = ReviewRepository()
service = ProductService(repo, review_repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    category: str | None = None,
    featured: bool | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """
    List products, newest first.

    - Optional `category` (display name) and `featured` filters.
    """
    return service.list_products(
        session, category=category, featured=featured, skip=skip, limit=limit
    )


@router.get("/featured", response_model=list[ProductRead])
def featured_products(
    session: Session = Depends(get_session),
    limit: int = Query(6, ge=1, le=50),
):
    return service.featured_products(session, limit)


@router.get("/latest", response_model=list[ProductRead])
def latest_products(
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    return service.latest_products(session, limit)


@router.get("/discounts", response_model=list[ProductDiscountRead])
def high_discount_products(
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    """
    Discounted products, highest discount percentage first.
    """
    return service.high_discount_products(session, limit)


@router.get("/search", response_model=list[ProductRead])
def search_products(
    q: str = Query(..., max_length=100),
    session: Session = Depends(get_session),
    limit: int = Query(20, ge=1, le=50),
):
    """
    Case-insensitive search on name and description.
    """
    return service.search_products(session, q, limit)


@router.get("/slug/{slug}", response_model=ProductDetailRead)
def get_product_by_slug(
    slug: str,
    session: Session = Depends(get_session),
):
    """
    Product page lookup. Falls back to the product id for old links.
    """
    return service.get_product_by_slug(session, slug)


@router.get("/{product_id}", response_model=ProductDetailRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_product_detail(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_product(session, product_id)
    return None


@router.post(
    "/{product_id}/images",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
    summary="Upload one or more images for a product",
)
def upload_product_images(
    product_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    session: Session = Depends(get_session),
):
    """
    Upload product images (admin only).

    - Accepts JPEG, PNG, WEBP up to 5MB each.
    - New images are appended to `images`.
    """
    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No files uploaded",
        )

    payload: list[tuple[str, bytes]] = []
    for f in files:
        if not f.content_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing content-type for one of the uploaded files",
            )
        payload.append((f.content_type, f.file.read()))

    return service.add_images(session, product_id, payload)
