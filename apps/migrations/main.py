from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Mapping

from psycopg.conninfo import conninfo_to_dict
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection
from sqlalchemy.engine.url import make_url

from alembic import command
from alembic.config import Config

log = logging.getLogger(__name__)

_SECRETS_PG_DSN_KEY = "SECRETS_PG_DSN"
_DEFAULT_LOCK_KEY = 20221001
_URL_SCHEMES = ("postgresql+psycopg://", "postgresql://", "postgres://")
_CONNINFO_RESERVED_KEYS = frozenset({"dbname", "host", "hostaddr", "password", "port", "user"})


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="secretshare-migrations")
    parser.add_argument(
        "--dsn",
        default="",
        help=f"Postgres DSN. Falls back to ${_SECRETS_PG_DSN_KEY} when omitted.",
    )
    parser.add_argument(
        "--lock-key",
        type=int,
        default=_DEFAULT_LOCK_KEY,
        help="pg_advisory_lock key serializing concurrent migration runners.",
    )
    return parser


def resolve_migration_dsn(*, arg_dsn: str, environ: Mapping[str, str]) -> str:
    """
    Resolve Postgres DSN from CLI argument or `SECRETS_PG_DSN`.

    Args:
        arg_dsn: CLI `--dsn` value.
        environ: Environment mapping.
    Returns:
        str: Non-empty stripped DSN.
    Assumptions:
        CLI argument wins over environment.
    Raises:
        ValueError: If neither source provides a DSN.
    Side Effects:
        None.
    """
    dsn = arg_dsn.strip() or environ.get(_SECRETS_PG_DSN_KEY, "").strip()
    if not dsn:
        raise ValueError(f"Migration DSN is required via --dsn or {_SECRETS_PG_DSN_KEY}")
    return dsn


def to_sqlalchemy_psycopg_url(*, dsn: str) -> URL:
    """
    Normalize URL or libpq conninfo DSN to a SQLAlchemy `postgresql+psycopg` URL.

    Args:
        dsn: Raw Postgres DSN.
    Returns:
        URL: SQLAlchemy URL using psycopg 3 driver.
    Assumptions:
        URL detection is prefix-based; anything else is parsed as conninfo.
    Raises:
        ValueError: If DSN is empty, uses a foreign driver, or is not valid conninfo.
    Side Effects:
        None.
    """
    normalized = dsn.strip()
    if not normalized:
        raise ValueError("Postgres DSN cannot be empty")

    if normalized.startswith(_URL_SCHEMES):
        parsed_url = make_url(normalized)
        if parsed_url.drivername not in {"postgresql", "postgres", "postgresql+psycopg"}:
            raise ValueError("Postgres URL DSN must use postgresql:// or postgres:// scheme")
        return parsed_url.set(drivername="postgresql+psycopg")

    try:
        fields = conninfo_to_dict(normalized)
    except Exception as error:  # noqa: BLE001
        raise ValueError("Postgres DSN must be URL or libpq conninfo format") from error

    raw_port = str(fields.get("port", "")).strip()
    if raw_port and not raw_port.isdigit():
        raise ValueError("Conninfo port must be numeric when provided")

    return URL.create(
        "postgresql+psycopg",
        username=str(fields.get("user", "")).strip() or None,
        password=str(fields.get("password", "")).strip() or None,
        host=str(fields.get("host", fields.get("hostaddr", ""))).strip() or None,
        port=int(raw_port) if raw_port else None,
        database=str(fields.get("dbname", "")).strip() or None,
        query={
            key: str(value)
            for key, value in sorted(fields.items())
            if key not in _CONNINFO_RESERVED_KEYS and str(value)
        },
    )


def _build_alembic_config(*, repo_root: Path) -> Config:
    alembic_ini = repo_root / "alembic.ini"
    if not alembic_ini.exists():
        raise ValueError(f"Missing Alembic config file: {alembic_ini}")
    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(repo_root / "alembic"))
    return config


def _upgrade_head_under_lock(*, config: Config, sqlalchemy_url: URL, lock_key: int) -> None:
    """
    Run `alembic upgrade head` on the connection that holds the advisory lock.

    Args:
        config: Prepared Alembic config.
        sqlalchemy_url: Target database URL.
        lock_key: Advisory lock key.
    Returns:
        None.
    Assumptions:
        Lock is released even when upgrade fails.
    Raises:
        Exception: Any DB or Alembic failure is propagated.
    Side Effects:
        Applies schema migrations.
    """
    engine = create_engine(sqlalchemy_url, pool_pre_ping=True)
    with engine.connect() as connection:
        _advisory_lock(connection=connection, lock_key=lock_key, acquire=True)
        try:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")
            connection.commit()
        except Exception:  # noqa: BLE001
            connection.rollback()
            raise
        finally:
            _advisory_lock(connection=connection, lock_key=lock_key, acquire=False)
            connection.commit()


def _advisory_lock(*, connection: Connection, lock_key: int, acquire: bool) -> None:
    function_name = "pg_advisory_lock" if acquire else "pg_advisory_unlock"
    log.info("%s(%s)", function_name, lock_key)
    connection.execute(text(f"SELECT {function_name}(:lock_key)"), {"lock_key": lock_key})


def main(argv: list[str] | None = None) -> int:
    """
    Apply secrets schema migrations and report status through the exit code.

    Args:
        argv: Optional CLI argument list without program name.
    Returns:
        int: Zero on success, one on failure.
    Assumptions:
        Deployment blocks API startup until this command succeeds.
    Raises:
        None.
    Side Effects:
        Reads environment, connects to Postgres, applies migrations, writes logs.
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        dsn = resolve_migration_dsn(arg_dsn=args.dsn, environ=os.environ)
        config = _build_alembic_config(repo_root=Path(__file__).resolve().parents[2])
        _upgrade_head_under_lock(
            config=config,
            sqlalchemy_url=to_sqlalchemy_psycopg_url(dsn=dsn),
            lock_key=args.lock_key,
        )
    except Exception as error:  # noqa: BLE001
        log.error("secrets migration failed: %s", error)
        return 1
    log.info("secrets migration succeeded")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
