"""Create secrets v1 table for encrypted, time-bounded shared secrets."""

from __future__ import annotations

from alembic import op

# revision identifiers, used by Alembic.
revision = "20221001_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Apply secrets v1 storage schema.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Migration is additive and safe on fresh environments.
    Raises:
        Exception: Postgres execution errors from Alembic runtime.
    Side Effects:
        Creates secrets table, constraints, and expiration index.
    """
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS secrets_secrets (
            id TEXT PRIMARY KEY,
            secret TEXT NOT NULL,
            token TEXT NOT NULL,
            iv TEXT NOT NULL,
            expire_at TIMESTAMPTZ NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL,
            organisation TEXT NOT NULL,
            CONSTRAINT secrets_secrets_organisation_chk
                CHECK (btrim(organisation) <> ''),
            CONSTRAINT secrets_secrets_expire_after_created_chk
                CHECK (expire_at >= created_at)
        )
        """
    )
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_secrets_secrets_expire_at
            ON secrets_secrets (expire_at)
        """
    )


def downgrade() -> None:
    """
    Revert secrets v1 storage schema.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Dropping the table discards every stored secret.
    Raises:
        Exception: Postgres execution errors from Alembic runtime.
    Side Effects:
        Drops secrets table and its index.
    """
    op.execute("DROP INDEX IF EXISTS idx_secrets_secrets_expire_at")
    op.execute("DROP TABLE IF EXISTS secrets_secrets")
