"""
Alembic environment for the `projects` and `project_contributors` tables.

The URL is taken from Settings.DATABASE_URL, so migrations and the app
always target the same database. Models are imported below to register
both tables on Base.metadata; autogenerate diffs against that metadata,
including the unique (project_id, user_id) contributor index.
Online migrations run on the async driver from the URL.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from project_access.core.config import settings
from project_access.core.database import Base

# Import all models so Base.metadata is fully populated
import project_access.models.project  # noqa: F401
import project_access.models.contributor  # noqa: F401

# ── Alembic Config object ──────────────────────────────────
config = context.config

# Set the sqlalchemy URL programmatically (overrides alembic.ini)
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# MetaData for autogenerate support
target_metadata = Base.metadata


# ── Offline mode (generates SQL script, no DB connection) ──
def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


# ── Online (async) mode ────────────────────────────────────
def do_run_migrations(connection) -> None:  # type: ignore[no-untyped-def]
    """Configure context with a live connection and run."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Create an async engine and run migrations."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (async)."""
    asyncio.run(run_async_migrations())


# ── Entrypoint ──────────────────────────────────────────────
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
