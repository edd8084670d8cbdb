"""Database initialization helper.

Creates the inventory tables in the configured database and emits SQL DDL
into ``database/schema.sql``.

Copyright (c) Bryn Gwalad 2025
"""

from __future__ import annotations
import sys
from pathlib import Path

# Ensure project root is on sys.path so `from api import models` works when
# running this script directly (python database/init_db.py).
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from sqlmodel import SQLModel
from sqlalchemy.schema import CreateTable

from utils.database import create_db_engine
from utils.settings import Settings


def main() -> None:
    """Create the database and emit SQL DDL.

    The database URL comes from ``DATABASE_URL`` or falls back to
    ``SQLITE_FILE``.
    """
    settings = Settings.from_env()
    print(f"Using database URL: {settings.database_url}")

    engine = create_db_engine(settings.database_url, echo=True)

    print("Creating tables...")
    SQLModel.metadata.create_all(engine)
    print("Tables created.")

    schema_path = ROOT / "database" / "schema.sql"
    print(f"Writing SQL DDL to {schema_path}")
    with open(schema_path, "w", encoding="utf-8") as f:
        for table in SQLModel.metadata.sorted_tables:
            ddl = str(CreateTable(table).compile(engine))
            f.write(ddl)
            f.write(";\n\n")

    print("Done.\n")


if __name__ == "__main__":
    main()
