# scripts/setup/init_db.py
"""
Initialize database — creates the visitors and approvals tables.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from vms.database import create_tables, engine
from vms.config import settings
from sqlalchemy import inspect, text


def main():
    print("Visitor DB Initialization")
    print("=" * 40)
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\nCreating tables...")
    create_tables()

    tables = sorted(inspect(engine).get_table_names())
    print(f"\nTables in database ({len(tables)} total):")
    for t in tables:
        print(f"   - {t}")

    os.makedirs(settings.PHOTO_DIR, exist_ok=True)
    print(f"\nPhoto directory: {os.path.abspath(settings.PHOTO_DIR)}")

    print("\nDatabase ready! You can now start the backend:")
    print(f"   uvicorn vms.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
