"""
Release-phase helper.

- Fail fast on a production deploy pointed at SQLite.
- Run alembic migrations.
- Seed statuses/permissions/roles/users (idempotent; does NOT overwrite existing passwords).

Usage:
  python scripts/release.py
"""

from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def run_release() -> None:
    load_dotenv()
    from app.alliance.config import is_production, load_settings

    settings = load_settings()
    db_url = settings.database_url
    # Guardrail: prevent accidental prod deploys against SQLite.
    if is_production(settings.env) and db_url.startswith("sqlite"):
        raise RuntimeError(
            "Refusing to run release on sqlite in production. Set DATABASE_URL or DB_HOST/DB_USER/DB_NAME."
        )

    print("=== Alliance release start ===", flush=True)
    print(f"ENV={settings.env or '(unset)'}", flush=True)
    print("Running Alembic migrations...", flush=True)

    from alembic import command
    from alembic.config import Config

    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
    command.upgrade(cfg, "head")
    print("Migrations complete.", flush=True)

    print("Seeding statuses/permissions/users (idempotent)...", flush=True)
    from scripts import init_db

    init_db.seed_only(database_url=db_url)
    print("Seed complete.", flush=True)
    print("=== Alliance release done ===", flush=True)


def main() -> None:
    run_release()


if __name__ == "__main__":
    main()
