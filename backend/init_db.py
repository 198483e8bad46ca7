#!/usr/bin/env python3
"""
Database initialization script for the demo bank.
Creates all tables on DATABASE_URL and loads the demo customer.
"""
import sys

from demobank.config import settings
from demobank.database import Store
from demobank.logging_config import setup_logging
from demobank.seed import DEMO_EMAIL, DEMO_PASSWORD, seed_database


def init_db(url: str) -> int:
    if url in ("sqlite://", "sqlite:///:memory:"):
        print("❌ DATABASE_URL points at an in-memory database; nothing would be kept")
        return 1

    print(f"🔧 Creating tables on {url}...")
    store = Store(url)
    try:
        with store.session() as db:
            summary = seed_database(db, now=store.now())
    finally:
        store.dispose()

    print(f"✅ Seeded {summary['customer'].name} with accounts {summary['checking_account'].number} and {summary['savings_account'].number}")
    print(f"👤 Demo login: {DEMO_EMAIL} / {DEMO_PASSWORD}")
    return 0


if __name__ == "__main__":
    setup_logging(settings.log_level, settings.log_file)
    sys.exit(init_db(sys.argv[1] if len(sys.argv) > 1 else settings.database_url))
