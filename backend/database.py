"""
Database configuration and schema management for the score ledger.

SQLite is the default backend. When DATABASE_URL (or the PG* variables) is
set, the PostgreSQL backend in database_postgres is used instead.
"""

import logging
import os
import sqlite3
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SQLITE = "sqlite"
POSTGRES = "postgres"


def get_backend() -> str:
    """
    Determine which database backend to use.

    Returns:
        'postgres' if DATABASE_URL or a full set of PG* variables is present,
        otherwise 'sqlite'.
    """
    if os.getenv('DATABASE_URL'):
        return POSTGRES
    if all(os.getenv(name) for name in ('PGHOST', 'PGUSER', 'PGPASSWORD', 'PGDATABASE')):
        return POSTGRES
    return SQLITE


def get_database_path() -> str:
    """
    Determine the SQLite database path.

    Returns:
        SNAKE_DB_PATH if set, otherwise backend/snake_scores.db
    """
    configured = os.getenv('SNAKE_DB_PATH')
    if configured:
        parent = os.path.dirname(configured)
        if parent:
            os.makedirs(parent, exist_ok=True)
        return configured

    backend_dir = Path(__file__).parent
    return str(backend_dir / 'snake_scores.db')


def get_connection(db_path: str = None) -> sqlite3.Connection:
    """
    Get a database connection with appropriate settings.

    Returns:
        sqlite3.Connection: Database connection with row factory enabled.
    """
    conn = sqlite3.connect(db_path or get_database_path())
    conn.row_factory = sqlite3.Row  # Enable column access by name
    return conn


def init_database(db_path: str = None) -> None:
    """
    Initialize the scores schema.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    path = db_path or get_database_path()
    logger.info("Initializing database at: %s", path)

    conn = get_connection(path)
    cursor = conn.cursor()

    try:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS scores (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                score INTEGER NOT NULL,
                player_name TEXT NOT NULL,
                snake_length INTEGER NOT NULL,
                game_speed_level TEXT NOT NULL,
                timestamp INTEGER NOT NULL,
                game_duration_ms INTEGER NOT NULL
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
            cursor.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))

        conn.commit()
        logger.debug("Database schema initialized successfully")

    except Exception as e:
        conn.rollback()
        logger.error(f"Error initializing database: {e}")
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    # Allow running this module directly to initialize the database
    logging.basicConfig(level="INFO", format="%(asctime)s [%(levelname)s] %(message)s")
    init_database()
    print(f"Database ready at: {get_database_path()}")
