# storefront/database.py
import logging

from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Supabase Postgres connection (via pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep only 1 connection to the Supabase pooler
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# Supabase Session mode limits the number of clients, so each backend
# process keeps a single pooled connection.
#
# Without DATABASE_URL we fall back to a local SQLite file so the API can
# still start for development.
# ---------------------------------------------------------


def build_database_url(raw_url: str | None) -> str:
    """
    Return the URL the engine should use.

    - None/empty => SQLite fallback
    - Postgres URL => append sslmode=require if it is not already present
    """
    if not raw_url:
        return settings.SQLITE_FALLBACK_URL

    if raw_url.startswith("postgres") and "sslmode=" not in raw_url:
        if "?" in raw_url:
            return raw_url + "&sslmode=require"
        return raw_url + "?sslmode=require"

    return raw_url


db_url = build_database_url(settings.DATABASE_URL)

if db_url.startswith("sqlite"):
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL is not set, using local SQLite database")
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
