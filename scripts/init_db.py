#!/usr/bin/env python3
"""
Database Initialization Script

Applies app/db/schema.sql to PostgreSQL (idempotent) and creates the
MongoDB indexes.
Usage: python scripts/init_db.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import get_db_session, init_schema, SCHEMA_PATH
from app.db.mongodb import init_mongo_indexes


def main():
    print(f"[1] Applying {SCHEMA_PATH.name}...")
    with get_db_session() as db:
        init_schema(db)
    print("    ✅ PostgreSQL schema ready")

    print("[2] Creating MongoDB indexes...")
    init_mongo_indexes()
    print("    ✅ MongoDB indexes ready")


if __name__ == "__main__":
    main()
