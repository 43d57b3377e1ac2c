# alembic/env.py

import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# ------------------------------------------------------------------------------
# 0) Load .env so that os.getenv("DATABASE_URL") works
# ------------------------------------------------------------------------------
from dotenv import load_dotenv
load_dotenv()

# ------------------------------------------------------------------------------
# 1) Run "alembic" from the project root so that "import app" resolves.
# ------------------------------------------------------------------------------
sys.path.insert(0, os.getcwd())

from app.core.database import Base, normalize_database_url
import app.db.models  # noqa: F401  (populates Base.metadata)

# ------------------------------------------------------------------------------
# 2) Override the URL in alembic.ini with the environment variable
# ------------------------------------------------------------------------------
config = context.config
real_url = os.getenv("DATABASE_URL")
if real_url is None:
    raise RuntimeError("DATABASE_URL is not set in your environment.")
config.set_main_option("sqlalchemy.url", normalize_database_url(real_url))

if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL scripts without a database connection."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
