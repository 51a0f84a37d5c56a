"""
➡️ But : Versionner le schéma SQLite avec une table de migrations explicite.

La version courante est stockée dans PRAGMA user_version.

MIGRATIONS[n] fait passer la base de la version n-1 à la version n.
migrate() applique les étapes manquantes dans l'ordre et enregistre la version après chaque étape.
SQLite valide le DDL au fil de l'eau : une étape interrompue est simplement rejouée au lancement suivant.

🔹 Avantages :

Pas de ALTER conditionnels éparpillés : une base v1 et une base neuve finissent avec le même schéma.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

LOGGER = logging.getLogger(__name__)


class SchemaVersionError(RuntimeError):
    pass


@dataclass(frozen=True)
class Migration:
    description: str
    statements: Tuple[str, ...]


MIGRATIONS: Dict[int, Migration] = {
    1: Migration(
        "create notes table",
        (
            "CREATE TABLE IF NOT EXISTS notes ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " title TEXT,"
            " body TEXT,"
            " created_at INTEGER,"
            " modified_at INTEGER"
            ")",
        ),
    ),
    2: Migration(
        "add category column",
        ("ALTER TABLE notes ADD COLUMN category INTEGER DEFAULT 0",),
    ),
}

LATEST_VERSION = max(MIGRATIONS)


def get_db_version(conn: Connection) -> int:
    return int(conn.execute(text("PRAGMA user_version")).scalar() or 0)


def set_db_version(conn: Connection, version: int) -> None:
    # PRAGMA n'accepte pas de paramètre lié
    conn.execute(text(f"PRAGMA user_version = {int(version)}"))


def migrate(engine: Engine, target: int = LATEST_VERSION) -> int:
    """Amène la base à `target` et retourne la version finale."""
    if target not in MIGRATIONS:
        raise SchemaVersionError(f"Unknown schema version {target}")

    with engine.begin() as conn:
        current = get_db_version(conn)
        if current > target:
            raise SchemaVersionError(
                f"Database schema version {current} is newer than supported version {target}"
            )
        if current == target:
            return current

        if current:
            LOGGER.warning(
                "Upgrading database from version %s to %s, which will preserve existing data",
                current, target,
            )
        for version in range(current + 1, target + 1):
            migration = MIGRATIONS[version]
            for statement in migration.statements:
                conn.execute(text(statement))
            set_db_version(conn, version)
            LOGGER.info("Applied migration %s: %s", version, migration.description)
    return target
