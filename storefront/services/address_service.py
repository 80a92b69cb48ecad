# storefront/services/address_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.address import UserAddress
from storefront.repositories.address_repo import AddressRepository
from storefront.schemas.address import AddressCreate, AddressUpdate


class AddressService:
    """
    Saved addresses of a user.

    Default switching always clears the flag on every address of the
    user first, then sets it on the chosen one.
    """

    def __init__(self, repo: AddressRepository):
        self.repo = repo

    def _get_or_404(
        self, session: Session, user_id: str, address_id: uuid.UUID
    ) -> UserAddress:
        address = self.repo.get_for_user(session, user_id, address_id)
        if not address:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Address not found",
            )
        return address

    def list_addresses(self, session: Session, user_id: str) -> list[UserAddress]:
        return self.repo.list_for_user(session, user_id)

    def get_address(
        self, session: Session, user_id: str, address_id: uuid.UUID
    ) -> UserAddress:
        return self._get_or_404(session, user_id, address_id)

    def get_default(self, session: Session, user_id: str) -> UserAddress:
        address = self.repo.get_default(session, user_id)
        if not address:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No default address",
            )
        return address

    def create_address(
        self, session: Session, user_id: str, payload: AddressCreate
    ) -> UserAddress:
        """
        Save a new address; the first one always becomes the default.
        """
        make_default = payload.is_default or not self.repo.list_for_user(session, user_id)
        if make_default:
            self.repo.clear_default(session, user_id)

        address = UserAddress(
            **payload.model_dump(exclude={"is_default"}),
            user_id=user_id,
            is_default=make_default,
        )
        return self.repo.save(session, address)

    def update_address(
        self,
        session: Session,
        user_id: str,
        address_id: uuid.UUID,
        payload: AddressUpdate,
    ) -> UserAddress:
        address = self._get_or_404(session, user_id, address_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(address, field, value)
        address.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, address)

    def delete_address(self, session: Session, user_id: str, address_id: uuid.UUID) -> None:
        address = self._get_or_404(session, user_id, address_id)
        self.repo.delete(session, address)

    def set_default(
        self, session: Session, user_id: str, address_id: uuid.UUID
    ) -> UserAddress:
        address = self._get_or_404(session, user_id, address_id)
        self.repo.clear_default(session, user_id)
        address.is_default = True
        address.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, address)
