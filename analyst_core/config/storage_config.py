import os

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv())

# Single key holding the whole saved-analysis collection
SAVED_ANALYSES_KEY = os.getenv("SAVED_ANALYSES_KEY", "stock_analyst_saved_analyses")


def build_database_url() -> str:
    """
    Resolve the storage database URL.
    DATABASE_URL wins; otherwise a Postgres URL is assembled from POSTGRES_* parts.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    pg_user = os.environ.get("POSTGRES_USER", "postgres")
    pg_pass = os.environ.get("POSTGRES_PASSWORD", "postgres")
    pg_host = os.environ.get("POSTGRES_HOST", "localhost")
    pg_port = os.environ.get("POSTGRES_PORT", "5432")
    pg_db = os.environ.get("POSTGRES_DB", "stock_analyst")

    # Using asyncpg (native asyncio) for stability
    return f"postgresql+asyncpg://{pg_user}:{pg_pass}@{pg_host}:{pg_port}/{pg_db}"


DATABASE_URL = build_database_url()
