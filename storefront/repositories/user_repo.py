# storefront/repositories/user_repo.py
from sqlmodel import Session, select

from storefront.models.user import User


class UserRepository:
    """
    Local mirror of identity-provider users. Pure DB access.
    """

    def get_by_id(self, session: Session, user_id: str) -> User | None:
        return session.get(User, user_id)

    def list(
        self,
        session: Session,
        role: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[User]:
        """
        Newest first, optionally only one role.
        """
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        stmt = stmt.order_by(User.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def save(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        """No commit: deletion is committed together with the order flags."""
        session.delete(user)
        session.flush()
