# seed_database.py
"""
Seed the catalog categories and backfill product slugs.

    python seed_database.py            # fill missing slugs only
    python seed_database.py --all      # also rewrite stale slugs
"""
import logging
import sys

from sqlmodel import Session

from storefront.database import create_db_and_tables, engine
from storefront.models.product import Category
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.services.product_service import ProductService, generate_slug

# Import remaining models so create_all() sees every table
from storefront.models import address, custom_design, notify, order, review, user, wishlist  # noqa: F401

logger = logging.getLogger("seed")

CATEGORIES = [
    ("Painting", "abstract painting"),
    ("Pots", "painted pot"),
    ("Canvas", "artist canvas"),
    ("Hand Painted Jewelry", "terracotta necklace"),
    ("Terracotta Pots", "terracotta pot"),
    ("Fabric Painting", "painted fabric"),
    ("Portrait", "portrait painting"),
    ("Wall Hanging", "wall hanging"),
]


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO)
    mode = "all" if "--all" in argv else "missing"

    create_db_and_tables()

    product_repo = ProductRepository()
    service = ProductService(product_repo, ReviewRepository())

    with Session(engine) as session:
        for name, description in CATEGORIES:
            product_repo.upsert_category(
                session,
                Category(id=generate_slug(name), name=name, description=description),
            )
        logger.info("Seeded %d categories", len(CATEGORIES))

        report = service.repair_slugs(session, mode)
        logger.info(report.message)
        for fix in report.fixed_products:
            logger.info("  %s: %r -> %r", fix.id, fix.old_slug, fix.new_slug)

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
