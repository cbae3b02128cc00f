"""
Base repository with connection management.

Provides a context manager for database connections that handles:
- Automatic connection cleanup
- Transaction commit on success
- Transaction rollback on failure
- Translating driver errors into StorageFailure
"""

from contextlib import contextmanager
from typing import Any, Generator, Optional
import sqlite3

import psycopg2

import database
import database_postgres
from domain.errors import StorageFailure

DATABASE_ERRORS = (sqlite3.Error, psycopg2.Error)


class BaseRepository:
    """
    Base class for all repositories.

    Provides connection management via context manager pattern.
    Subclasses should use self.connection() to get database connections
    and write queries with %s placeholders; self.sql() adapts them to the
    active backend.
    """

    def __init__(self, backend: Optional[str] = None, db_path: Optional[str] = None):
        self.backend = backend or database.get_backend()
        self.db_path = db_path

    def _connect(self):
        if self.backend == database.POSTGRES:
            return database_postgres.get_connection()
        return database.get_connection(self.db_path)

    def init_schema(self) -> None:
        """Create tables if they do not exist yet."""
        try:
            if self.backend == database.POSTGRES:
                database_postgres.init_database()
            else:
                database.init_database(self.db_path)
        except DATABASE_ERRORS as e:
            raise StorageFailure(f"Could not initialize score schema: {e}") from e

    def sql(self, query: str) -> str:
        if self.backend == database.SQLITE:
            return query.replace('%s', '?')
        return query

    @contextmanager
    def connection(self, auto_commit: bool = True) -> Generator[Any, None, None]:
        """
        Context manager for database connections.

        Args:
            auto_commit: If True, commit transaction on successful exit.

        Yields:
            A tuple of (connection, cursor) for database operations.

        Raises:
            StorageFailure: If the driver reports an error

        Example:
            with self.connection() as (conn, cursor):
                cursor.execute(self.sql("DELETE FROM scores"))
        """
        try:
            conn = self._connect()
        except DATABASE_ERRORS as e:
            raise StorageFailure(f"Could not connect to score database: {e}") from e

        cursor = conn.cursor()
        try:
            yield conn, cursor
            if auto_commit:
                conn.commit()
        except DATABASE_ERRORS as e:
            conn.rollback()
            raise StorageFailure(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    @contextmanager
    def read_connection(self) -> Generator[Any, None, None]:
        """
        Context manager for read-only operations.

        Same as connection() but with auto_commit=False since
        read operations don't need commits.
        """
        with self.connection(auto_commit=False) as handles:
            yield handles
