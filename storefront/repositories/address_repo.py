# storefront/repositories/address_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.address import UserAddress


class AddressRepository:
    """
    Data access layer for saved addresses.

    Ownership is part of every lookup: an address id is only found
    together with its user_id.
    """

    def list_for_user(self, session: Session, user_id: str) -> list[UserAddress]:
        stmt = (
            select(UserAddress)
            .where(UserAddress.user_id == user_id)
            .order_by(UserAddress.is_default.desc(), UserAddress.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def get_for_user(
        self,
        session: Session,
        user_id: str,
        address_id: uuid.UUID,
    ) -> UserAddress | None:
        stmt = select(UserAddress).where(
            UserAddress.id == address_id, UserAddress.user_id == user_id
        )
        return session.exec(stmt).first()

    def get_default(self, session: Session, user_id: str) -> UserAddress | None:
        stmt = select(UserAddress).where(
            UserAddress.user_id == user_id, UserAddress.is_default == True  # noqa: E712
        )
        return session.exec(stmt).first()

    def clear_default(self, session: Session, user_id: str) -> None:
        """
        Unset is_default on every address of the user (no commit).
        """
        stmt = select(UserAddress).where(
            UserAddress.user_id == user_id, UserAddress.is_default == True  # noqa: E712
        )
        for address in session.exec(stmt).all():
            address.is_default = False
            session.add(address)
        session.flush()

    def save(self, session: Session, address: UserAddress) -> UserAddress:
        session.add(address)
        session.commit()
        session.refresh(address)
        return address

    def delete(self, session: Session, address: UserAddress) -> None:
        session.delete(address)
        session.commit()
