"""Apply database/schema.sql to the database selected by APP_ENV and the DB_* variables."""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from daycare_system.config import get_settings_module
from daycare_system.database.bootstrap import apply_schema, list_tables


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = sorted(list_tables(db_config))
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    print(f"OK: schema applied to {target}")
    for name in tables:
        print(f"  - {name}")


if __name__ == "__main__":
    main()
