"""
Apply the SQL files under migrations/ to DATABASE_URL, in name order.
"""

import argparse
import sys
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

load_dotenv()

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.core.config import settings
from src.core.utils import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def collect_migrations(target_path: Path) -> list[Path]:
    if target_path.is_file():
        return [target_path]
    return sorted(target_path.glob("*.sql"))


def run_migrations(path_arg=None, dry_run=False) -> bool:
    target_path = Path(path_arg) if path_arg else MIGRATIONS_DIR

    if not target_path.exists():
        logger.error("Migration path does not exist", path=str(target_path))
        return False

    sql_files = collect_migrations(target_path)
    if not sql_files:
        logger.warning("No .sql files found", path=str(target_path))
        return True

    if dry_run:
        for sql_file in sql_files:
            logger.info("[DRY-RUN] Would execute", file=sql_file.name)
        return True

    conn = psycopg2.connect(settings.database.url)
    cursor = conn.cursor()
    try:
        for sql_file in sql_files:
            logger.info("Running migration", file=sql_file.name)
            try:
                cursor.execute(sql_file.read_text())
                conn.commit()
            except psycopg2.Error as e:
                conn.rollback()
                logger.error("Migration failed", file=sql_file.name, error=str(e))
                return False
    finally:
        cursor.close()
        conn.close()

    logger.info("Migration(s) completed", count=len(sql_files))
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run database migrations")
    parser.add_argument("path", nargs="?", help="Specific migration file path or directory to run (optional)")
    parser.add_argument("--dry-run", action="store_true", help="Simulate migration execution without applying changes")
    args = parser.parse_args()

    sys.exit(0 if run_migrations(args.path, args.dry_run) else 1)
