"""
Seed statuses, permissions, roles and the admin/staff users.

Idempotent; existing users keep their passwords.

Usage:
  python scripts/init_db.py
"""
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.alliance.config import load_settings  # noqa: E402
from app.alliance.seed import seed_defaults  # noqa: E402


def seed_only(*, database_url: str | None = None) -> None:
    db_url = (database_url or load_settings().database_url).strip()

    # Plain engine so release can seed without building the Flask app.
    engine = create_engine(db_url, pool_pre_ping=True)
    try:
        with Session(engine, expire_on_commit=False) as s, s.begin():
            seed_defaults(s)
    finally:
        engine.dispose()

    print("Initialized database (seed_only).")


def main() -> None:
    load_dotenv()
    seed_only(database_url=None)


if __name__ == "__main__":
    main()
