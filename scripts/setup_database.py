# scripts/setup_database.py
#!/usr/bin/env python
"""
Simple database setup script for a fresh database.
Run this to create all tables and seed the badge catalog:

    python -m scripts.setup_database [path/to/catalog.json]
"""
import sys
import logging
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))

from app.core.config import get_settings
from app.core.database import Base, build_engine, build_session_factory, session_scope
import app.db.models  # noqa: F401  (registers tables on Base.metadata)
from scripts.init_database import DEFAULT_CATALOG, init_catalog

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup(database_url: str, catalog_path: Path = DEFAULT_CATALOG) -> None:
    engine = build_engine(database_url)

    logger.info("Creating database tables...")
    # This creates all tables defined in models.py
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully!")

    logger.info(f"Seeding badge catalog from {catalog_path}...")
    with session_scope(build_session_factory(engine)) as db:
        init_catalog(catalog_path, db)


def main():
    """Create all tables and initialize with the default catalog"""
    catalog_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CATALOG
    try:
        setup(get_settings().database_url, catalog_path)
        logger.info("\n✅ Database setup complete!")
        logger.info("You can now start the application with: uvicorn app.main:app --reload")
    except Exception as e:
        logger.error(f"❌ Error setting up database: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
