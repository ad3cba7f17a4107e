from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import psycopg

from recovery_service.logging import setup_logging
from recovery_service.settings import get_settings

logger = logging.getLogger("recovery_service.infrastructure.db.migrate")

MIGRATIONS_DIR = Path(os.environ.get("MIGRATIONS_DIR", "migrations"))
SCHEMA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version    text PRIMARY KEY,
  applied_at timestamptz NOT NULL DEFAULT now()
);
"""


def list_migrations(directory: Path = MIGRATIONS_DIR) -> list[Path]:
    if not directory.exists():
        raise FileNotFoundError(f"migrations dir not found: {directory}")
    return sorted(directory.glob("*.sql"))


def applied_versions(conn: psycopg.Connection) -> set[str]:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute("SELECT version FROM schema_migrations ORDER BY version;")
        rows = cur.fetchall()
    conn.commit()
    return {r[0] for r in rows}


def apply_one(conn: psycopg.Connection, path: Path) -> None:
    version = path.stem
    with conn.cursor() as cur:
        cur.execute(path.read_text(encoding="utf-8"))
        cur.execute(
            "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, now());",
            (version,),
        )
    conn.commit()
    logger.info("migration applied", extra={"version": version})


def apply_pending(
    conn: psycopg.Connection, directory: Path = MIGRATIONS_DIR
) -> list[str]:
    """Apply every migration not yet recorded; return the versions applied."""
    done = applied_versions(conn)
    applied: list[str] = []
    for path in list_migrations(directory):
        if path.stem in done:
            continue
        try:
            apply_one(conn, path)
        except psycopg.Error:
            conn.rollback()
            logger.exception("migration failed", extra={"version": path.stem})
            raise
        applied.append(path.stem)
    return applied


def cmd_up() -> int:
    with psycopg.connect(get_settings().database_url, autocommit=False) as conn:
        try:
            applied = apply_pending(conn)
        except psycopg.Error:
            return 1
    if not applied:
        logger.info("no pending migrations")
    return 0


def cmd_status() -> int:
    with psycopg.connect(get_settings().database_url) as conn:
        done = applied_versions(conn)
    for path in list_migrations():
        logger.info(
            "migration status",
            extra={
                "version": path.stem,
                "state": "applied" if path.stem in done else "pending",
            },
        )
    return 0


def cmd_new(name: str) -> int:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M")
    path = MIGRATIONS_DIR / f"{ts}_{name}.sql"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("-- write your SQL here\n", encoding="utf-8")
    logger.info("migration created", extra={"path": str(path)})
    return 0


def main(argv: list[str]) -> int:
    setup_logging(get_settings().log_level)
    if len(argv) < 2:
        logger.error(
            "usage: python -m recovery_service.infrastructure.db.migrate "
            "[up|status|new <name>]"
        )
        return 2
    cmd = argv[1]
    if cmd == "up":
        return cmd_up()
    if cmd == "status":
        return cmd_status()
    if cmd == "new" and len(argv) >= 3:
        return cmd_new(argv[2])
    logger.error("unknown command", extra={"argv": argv[1:]})
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
