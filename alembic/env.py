from __future__ import annotations

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection

from alembic import context

config = context.config

target_metadata = None


def run_migrations_offline() -> None:
    """
    Emit secrets schema SQL without a live database connection.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        `sqlalchemy.url` is provided via `alembic.ini` or `-x` override.
    Raises:
        Exception: Alembic configuration/runtime errors.
    Side Effects:
        Writes SQL statements to Alembic output.

    Related:
      - alembic/versions/20221001_0001_secrets_storage_v1.py
      - apps/migrations/main.py
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Apply secrets schema on injected locked connection or on a fresh engine connection.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        `apps.migrations.main` injects the connection holding the advisory lock.
    Raises:
        Exception: Alembic configuration/runtime errors.
    Side Effects:
        Applies schema changes to Postgres.
    """
    injected_connection = config.attributes.get("connection")
    if isinstance(injected_connection, Connection):
        _run_on_connection(connection=injected_connection)
        return

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _run_on_connection(connection=connection)


def _run_on_connection(*, connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
