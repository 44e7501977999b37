"""Create the database and apply ``schema.sql`` (idempotent, CREATE ... IF NOT EXISTS)."""

from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

# Statements that pin a database name; the target comes from DB_CONFIG instead.
_DB_SELECTION = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b[^;]*;", re.IGNORECASE | re.MULTILINE)
_LINE_COMMENT = re.compile(r"^\s*--.*$", re.MULTILINE)
# A statement is everything up to a ';' that is not inside a quoted literal.
_STATEMENT = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^;'"])+""")


def iter_sql_statements(sql: str) -> list[str]:
    return [m.group(0).strip() for m in _STATEMENT.finditer(sql) if m.group(0).strip()]


def load_schema_statements(schema_path: str | Path = SCHEMA_PATH) -> list[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _LINE_COMMENT.sub("", _DB_SELECTION.sub("", sql))
    return iter_sql_statements(sql)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect(with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    statements = load_schema_statements(schema_path)

    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    logger.info("Applied %d statements from %s", len(statements), Path(schema_path).name)


def list_tables(db_config: dict) -> list[str]:
    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
