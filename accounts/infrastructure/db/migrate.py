from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

import psycopg

from accounts.logging import setup_logging
from accounts.settings import get_settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(
    os.environ.get("MIGRATIONS_DIR", Path(__file__).resolve().parent / "migrations")
)
SCHEMA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version    text PRIMARY KEY,
  applied_at timestamptz NOT NULL DEFAULT now()
);
"""


class MigrationError(RuntimeError):
    pass


def list_migrations(directory: Path = MIGRATIONS_DIR) -> list[Path]:
    if not directory.exists():
        raise MigrationError(f"migrations dir not found: {directory}")
    return sorted(directory.glob("*.sql"))


def pending_migrations(all_paths: list[Path], applied: set[str]) -> list[Path]:
    return [p for p in all_paths if p.stem not in applied]


def applied_versions(conn: psycopg.Connection) -> set[str]:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute("SELECT version FROM schema_migrations ORDER BY version;")
        rows = cur.fetchall()
    return {r[0] for r in rows}


def apply_one(conn: psycopg.Connection, path: Path) -> None:
    version = path.stem
    logger.info("applying migration", extra={"version": version})
    with conn.cursor() as cur:
        cur.execute(path.read_text(encoding="utf-8"))
        cur.execute(
            "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, now());",
            (version,),
        )
    conn.commit()


def cmd_up(dsn: str) -> int:
    with psycopg.connect(dsn, autocommit=False) as conn:
        to_run = pending_migrations(list_migrations(), applied_versions(conn))
        conn.commit()
        if not to_run:
            logger.info("no pending migrations")
            return 0
        for path in to_run:
            try:
                apply_one(conn, path)
            except psycopg.Error:
                conn.rollback()
                logger.exception("migration failed", extra={"version": path.stem})
                return 1
    return 0


def cmd_status(dsn: str) -> int:
    with psycopg.connect(dsn) as conn, conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute(
            "SELECT version, applied_at FROM schema_migrations ORDER BY version;"
        )
        rows = cur.fetchall()
    applied = {v: at for v, at in rows}
    for path in list_migrations():
        at = applied.get(path.stem)
        if at is None:
            print(f"pending  {path.stem}")
        else:
            stamp = at.isoformat() if isinstance(at, datetime) else at
            print(f"applied  {path.stem} @ {stamp}")
    return 0


def main(argv: list[str]) -> int:
    if len(argv) != 2 or argv[1] not in ("up", "status"):
        print(
            "usage: python -m accounts.infrastructure.db.migrate [up|status]",
            file=sys.stderr,
        )
        return 2
    settings = get_settings()
    setup_logging(settings.log_level)
    try:
        if argv[1] == "up":
            return cmd_up(settings.database_url)
        return cmd_status(settings.database_url)
    except MigrationError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
