# storefront/routers/custom_designs.py
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlmodel import Session

from storefront.core.auth import require_admin, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.custom_design_repo import CustomDesignRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.custom_design import (
    CategoryRead,
    CustomDesignCreate,
    CustomDesignDetailRead,
    CustomDesignRead,
    CustomDesignStatusUpdate,
    DesignStatus,
)
from storefront.schemas.product import ProductRead
from storefront.schemas.review import UploadedImages
from storefront.services.custom_design_service import CustomDesignService

router = APIRouter(prefix="/custom-designs", tags=["Custom designs"])

repo = CustomDesignRepository()
product_repo = ProductRepository()
service = CustomDesignService(repo, product_repo)


# -------- Intake form --------


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    Active categories, by name (public).
    """
    return service.list_categories(session)


@router.get("/categories/{category_id}/products", response_model=list[ProductRead])
def list_category_products(
    category_id: str,
    session: Session = Depends(get_session),
):
    return service.list_products_for_category(session, category_id)


@router.post("/images", response_model=UploadedImages)
def upload_reference_images(
    files: list[UploadFile] = File(...),
):
    """
    Upload reference images (any image type, up to 10MB each).
    """
    urls = []
    for f in files:
        if not f.content_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing content-type for one of the uploaded files",
            )
        urls.append(service.upload_reference_image(f.content_type, f.file.read()))
    return UploadedImages(urls=urls)


@router.post("", response_model=CustomDesignRead, status_code=status.HTTP_201_CREATED)
def submit_request(
    payload: CustomDesignCreate,
    session: Session = Depends(get_session),
):
    """
    Submit a custom design request (guests allowed).
    """
    return service.submit(session, payload)


# -------- Customer --------


@router.get("/me", response_model=list[CustomDesignRead])
def list_my_requests(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Requests submitted with the current user's email.
    """
    return service.list_for_user(session, current_user)


@router.get("/{request_id}", response_model=CustomDesignDetailRead)
def get_request(
    request_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.get_request(session, request_id, current_user)


# -------- Admin --------


@router.get(
    "",
    response_model=list[CustomDesignRead],
    dependencies=[Depends(require_admin)],
)
def list_all_requests(
    session: Session = Depends(get_session),
    status_filter: DesignStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    return service.list_all(session, status_filter, skip, limit)


@router.patch(
    "/{request_id}/status",
    response_model=CustomDesignRead,
    dependencies=[Depends(require_admin)],
)
def update_request_status(
    request_id: uuid.UUID,
    payload: CustomDesignStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update status, notes, prices or completion date (admin only).
    """
    return service.update_status(session, request_id, payload)
