# storefront/repositories/custom_design_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.custom_design import CustomDesignRequest


class CustomDesignRepository:

    def get_by_id(
        self, session: Session, request_id: uuid.UUID
    ) -> CustomDesignRequest | None:
        return session.get(CustomDesignRequest, request_id)

    def list_for_email(self, session: Session, email: str) -> list[CustomDesignRequest]:
        stmt = (
            select(CustomDesignRequest)
            .where(CustomDesignRequest.customer_email == email)
            .order_by(CustomDesignRequest.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_all(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[CustomDesignRequest]:
        stmt = select(CustomDesignRequest)
        if status is not None:
            stmt = stmt.where(CustomDesignRequest.status == status)
        stmt = (
            stmt.order_by(CustomDesignRequest.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def save(
        self, session: Session, request: CustomDesignRequest
    ) -> CustomDesignRequest:
        session.add(request)
        session.commit()
        session.refresh(request)
        return request
