#!/usr/bin/env python3
"""
Create the users, stores and ratings tables directly from the models.
Alembic (``alembic upgrade head``) is the way to manage a long-lived database;
this is for throwaway local setups.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import inspect
from core.config import settings
from database.connection import create_tables, engine

def main() -> int:
    print(f"Creating tables on {engine.url.render_as_string(hide_password=True)}...")
    try:
        create_tables()
    except Exception as e:
        print(f"❌ Failed to create tables: {e}")
        return 1

    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables ready ({settings.ENVIRONMENT}): {', '.join(tables)}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
