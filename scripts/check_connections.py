#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the databases and the AI gateway are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import test_postgres_connection
from app.db.mongodb import test_mongo_connection
from app.services.ai_client import get_ai_client
from app.core.config import get_settings


def main() -> int:
    settings = get_settings()
    failures = 0
    print("=" * 50)
    print("PLACEMENT PREP TRACKER - CONNECTION CHECK")
    print("=" * 50)

    # PostgreSQL
    print("\n[1] PostgreSQL...")
    print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ PostgreSQL: CONNECTED")
    else:
        print("    ❌ PostgreSQL: FAILED")
        failures += 1

    # MongoDB
    print("\n[2] MongoDB...")
    print(f"    Database: {settings.mongodb_db} (bucket: {settings.resume_bucket})")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")
        failures += 1

    # AI gateway (only if API key is set)
    print("\n[3] AI gateway...")
    if settings.ai_api_key:
        print(f"    Base URL: {settings.ai_base_url} (model: {settings.ai_model})")
        if get_ai_client().test_connection():
            print("    ✅ AI gateway: CONNECTED")
        else:
            print("    ❌ AI gateway: FAILED")
            failures += 1
    else:
        print("    ⚠️  AI gateway: AI_API_KEY not configured (skipped)")

    print("\n" + "=" * 50)
    print("Connection check complete!" if not failures else f"{failures} check(s) failed")
    print("=" * 50)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
