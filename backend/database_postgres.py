"""
PostgreSQL database connection and schema management.

Connects to PostgreSQL using DATABASE_URL (preferred) or individual
PGHOST/PGPORT/PGUSER/PGPASSWORD/PGDATABASE environment variables.
"""

import os
import logging

import psycopg2
from psycopg2.extras import RealDictCursor
from dotenv import load_dotenv

from database import SCHEMA_VERSION

load_dotenv()
logger = logging.getLogger(__name__)


def get_connection_string() -> str:
    """
    Get the PostgreSQL connection string.

    Priority:
    1. DATABASE_URL environment variable
    2. Individual PG* environment variables (PGHOST, PGPORT, PGUSER, PGPASSWORD, PGDATABASE)

    Returns:
        Connection string for PostgreSQL

    Raises:
        ValueError: If no valid connection configuration is found
    """
    database_url = os.getenv('DATABASE_URL')
    if database_url:
        return database_url

    pghost = os.getenv('PGHOST')
    pgport = os.getenv('PGPORT', '5432')
    pguser = os.getenv('PGUSER')
    pgpassword = os.getenv('PGPASSWORD')
    pgdatabase = os.getenv('PGDATABASE')

    if pghost and pguser and pgpassword and pgdatabase:
        return f"postgresql://{pguser}:{pgpassword}@{pghost}:{pgport}/{pgdatabase}"

    raise ValueError(
        "Database connection not configured. "
        "Set DATABASE_URL or PGHOST/PGUSER/PGPASSWORD/PGDATABASE environment variables."
    )


def get_connection():
    """
    Get a database connection to PostgreSQL.

    Returns:
        psycopg2 connection with RealDictCursor (returns rows as dictionaries)
    """
    try:
        conn_string = get_connection_string()
        return psycopg2.connect(conn_string, cursor_factory=RealDictCursor)
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise


def init_database() -> None:
    """
    Initialize the scores schema. Safe to call multiple times.
    """
    conn = get_connection()
    cursor = conn.cursor()

    try:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS scores (
                id BIGSERIAL PRIMARY KEY,
                score INTEGER NOT NULL,
                player_name VARCHAR(10) NOT NULL,
                snake_length INTEGER NOT NULL,
                game_speed_level TEXT NOT NULL,
                timestamp BIGINT NOT NULL,
                game_duration_ms BIGINT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_scores_score ON scores(score DESC, id ASC)")

        cursor.execute("SELECT COUNT(*) AS n FROM schema_version")
        if cursor.fetchone()['n'] == 0:
            cursor.execute("INSERT INTO schema_version (version) VALUES (%s)", (SCHEMA_VERSION,))

        conn.commit()
        logger.info("PostgreSQL scores schema ready")
    except Exception:
        conn.rollback()
        logger.exception("Failed to initialize PostgreSQL schema")
        raise
    finally:
        cursor.close()
        conn.close()


if __name__ == "__main__":
    logging.basicConfig(level="INFO", format="%(asctime)s [%(levelname)s] %(message)s")
    print("Testing PostgreSQL connection...")
    init_database()
