import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.auth import get_current_user
from storefront.database import get_session
from storefront.main import app
from storefront.models.product import Category, Product
from storefront.models.user import User
from storefront.routers import wishlist as wishlist_router
from storefront.services.product_service import generate_slug

API = "/api/v1"


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session, monkeypatch):
    app.dependency_overrides[get_session] = lambda: session
    # Keep wishlist toggles on the local database
    monkeypatch.setattr(wishlist_router.service, "rpc_client_factory", lambda: None)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """
    Authenticate subsequent requests as `user` (None logs out).
    """

    def _login(user: User | None) -> None:
        app.dependency_overrides[get_current_user] = lambda: user

    return _login


@pytest.fixture
def customer(session) -> User:
    user = User(
        id="user_customer",
        email="asha@example.com",
        first_name="Asha",
        last_name="Rao",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def other_customer(session) -> User:
    user = User(id="user_other", email="ravi@example.com", first_name="Ravi")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin(session) -> User:
    user = User(id="user_admin", email="owner@example.com", role="admin")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def make_product(session):
    def _make(name: str = "Hand Painted Pot", price: float = 500.0, **fields) -> Product:
        slug = fields.pop("slug", None)
        product = Product(
            name=name,
            slug=generate_slug(name) if slug is None else slug,
            price=price,
            **fields,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_category(session):
    def _make(name: str, **fields) -> Category:
        category = Category(id=generate_slug(name), name=name, **fields)
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    return _make
