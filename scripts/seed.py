"""
Seed the companies table used by the search box.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from psycopg2 import sql

from src.core.config import settings
from src.core.di.container import Container
from src.core.utils import get_logger

logger = get_logger(__name__)

COMPANIES = [
    {"ticker": "AAPL", "name": "Apple Inc.", "exchange": "NASDAQ", "sector": "Technology", "country": "US"},
    {"ticker": "MSFT", "name": "Microsoft Corporation", "exchange": "NASDAQ", "sector": "Technology", "country": "US"},
    {"ticker": "GOOGL", "name": "Alphabet Inc.", "exchange": "NASDAQ", "sector": "Communication Services", "country": "US"},
    {"ticker": "AMZN", "name": "Amazon.com Inc.", "exchange": "NASDAQ", "sector": "Consumer Discretionary", "country": "US"},
    {"ticker": "NVDA", "name": "NVIDIA Corporation", "exchange": "NASDAQ", "sector": "Technology", "country": "US"},
    {"ticker": "TSLA", "name": "Tesla Inc.", "exchange": "NASDAQ", "sector": "Consumer Discretionary", "country": "US"},
    {"ticker": "META", "name": "Meta Platforms Inc.", "exchange": "NASDAQ", "sector": "Communication Services", "country": "US"},
    {"ticker": "ASML", "name": "ASML Holding N.V.", "exchange": "NASDAQ", "sector": "Technology", "country": "NL"},
    {"ticker": "SAP", "name": "SAP SE", "exchange": "NYSE", "sector": "Technology", "country": "DE"},
    {"ticker": "NVO", "name": "Novo Nordisk A/S", "exchange": "NYSE", "sector": "Health Care", "country": "DK"},
]


def seed_companies_supabase(client):
    client.table("companies").upsert(COMPANIES, on_conflict="ticker").execute()


def seed_companies_postgres(db):
    columns = list(COMPANIES[0].keys())
    query = sql.SQL(
        "INSERT INTO companies ({columns}) VALUES ({placeholders}) ON CONFLICT (ticker) DO NOTHING"
    ).format(
        columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
        placeholders=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
    )
    with db.connection() as conn:
        with conn.cursor() as cursor:
            for company in COMPANIES:
                cursor.execute(query, tuple(company[c] for c in columns))
        conn.commit()


def main():
    container = Container()
    logger.info("Seeding companies", backend=settings.database.backend, count=len(COMPANIES))

    if settings.database.backend == "postgres":
        seed_companies_postgres(container.core.postgres_db())
    else:
        seed_companies_supabase(container.core.supabase_client())

    logger.info("Seed completed")


if __name__ == "__main__":
    main()
