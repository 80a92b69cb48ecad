# storefront/routers/maintenance.py
from typing import Literal

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.routers.products import service as product_service
from storefront.schemas.product import SlugRepairReport

router = APIRouter(
    prefix="/maintenance",
    tags=["Maintenance"],
    dependencies=[Depends(require_admin)],
)


@router.get("/fix-slugs", response_model=SlugRepairReport)
def fix_slugs(
    mode: Literal["missing", "all"] = "missing",
    session: Session = Depends(get_session),
):
    """
    Repair product slugs (admin only).

    - `missing`: fill empty slugs only.
    - `all`: also rewrite slugs that no longer match the product name.
    """
    return product_service.repair_slugs(session, mode)
