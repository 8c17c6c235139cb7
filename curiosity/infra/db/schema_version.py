from __future__ import annotations

import logging
from pathlib import Path

from curiosity.infra.db.connection import Database

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


async def apply_migrations(db: Database, now_iso: str, migrations_dir: Path = MIGRATIONS_DIR) -> list[int]:
    """Apply NNN_name.sql files in order, skipping versions already recorded. Returns applied versions."""
    await db.execute(
        "CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL);"
    )

    files = sorted([p for p in Path(migrations_dir).glob("*.sql") if p.is_file()])
    applied: list[int] = []

    for p in files:
        version = int(p.stem.split("_")[0])

        row = await db.fetchone("SELECT version FROM schema_migrations WHERE version = ?;", (version,))
        if row:
            continue

        sql = p.read_text(encoding="utf-8")
        await db.executescript(sql)

        await db.execute(
            "INSERT INTO schema_migrations(version, applied_at) VALUES (?, ?);",
            (version, now_iso),
        )
        logger.info("Applied migration %s", p.name)
        applied.append(version)

    return applied
