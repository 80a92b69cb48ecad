# storefront/repositories/product_repo.py
import uuid

from sqlalchemy import func, or_
from sqlmodel import Session, select

from storefront.models.product import Category, Product


class ProductRepository:
    """
    Data access layer for Product & Category.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def get_many(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> list[Product]:
        if not product_ids:
            return []
        stmt = select(Product).where(Product.id.in_(product_ids))
        return list(session.exec(stmt).all())

    def list_products(
        self,
        session: Session,
        category: str | None = None,
        featured: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        stmt = select(Product)
        if category is not None:
            stmt = stmt.where(Product.category == category)
        if featured is not None:
            stmt = stmt.where(Product.is_featured == featured)
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_discounted(self, session: Session) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.original_price.is_not(None))
            .where(Product.original_price > 0)
            .order_by(Product.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def search(self, session: Session, query: str, limit: int = 20) -> list[Product]:
        pattern = f"%{query.lower()}%"
        stmt = (
            select(Product)
            .where(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(func.coalesce(Product.description, "")).like(pattern),
                )
            )
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_all(self, session: Session) -> list[Product]:
        stmt = select(Product).order_by(Product.created_at.desc())
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    # ----- Categories -----

    def list_categories(
        self,
        session: Session,
        only_active: bool = True,
    ) -> list[Category]:
        stmt = select(Category)
        if only_active:
            stmt = stmt.where(Category.is_active == True)  # noqa: E712
        stmt = stmt.order_by(Category.name)
        return list(session.exec(stmt).all())

    def get_category(self, session: Session, category_id: str) -> Category | None:
        return session.get(Category, category_id)

    def list_by_category_id(self, session: Session, category_id: str) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.category_id == category_id)
            .order_by(Product.name)
        )
        return list(session.exec(stmt).all())

    def list_by_category_name(self, session: Session, name: str) -> list[Product]:
        stmt = select(Product).where(Product.category == name).order_by(Product.name)
        return list(session.exec(stmt).all())

    def upsert_category(self, session: Session, category: Category) -> Category:
        category = session.merge(category)
        session.commit()
        session.refresh(category)
        return category
