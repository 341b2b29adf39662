from __future__ import annotations

import importlib

from dotenv import load_dotenv

from guard_roster.config import get_settings_module
from guard_roster.container import build_container, build_store
from guard_roster.database.bootstrap import apply_schema, list_tables


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)

    container = build_container(store=build_store(backend="mysql", db_config=db_config))
    created = container.auth_service.ensure_admin()
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)}, admin {'created' if created else 'already present'})"
    )


if __name__ == "__main__":
    main()
