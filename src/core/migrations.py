#!/usr/bin/env python3
"""
Schema migrations over a direct PostgreSQL connection.

The REST API cannot run DDL, so migrations connect with psycopg using the
database password. Everything else in the app goes through the REST adapter.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

import psycopg
from psycopg.rows import dict_row

from core.config import DatabaseConfig
from core.exceptions import ConfigurationError, DatabaseConnectionError, DatabaseOperationError

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "database" / "migrations"


def build_connection_string(config: DatabaseConfig) -> str:
    """Build PostgreSQL connection string from configuration."""
    if not config.supabase_db_password:
        raise ConfigurationError('SUPABASE_DB_PASSWORD', 'required for a direct database connection')

    url = config.supabase_url
    if not url.startswith('https://'):
        raise ConfigurationError('SUPABASE_URL', f"invalid Supabase URL format: {url}")

    host = url.replace('https://', '').rstrip('/')

    # Connection pooler port
    return f"postgresql://postgres:{config.supabase_db_password}@{host}:6543/postgres?sslmode=require"


def list_migrations(directory: Optional[Path] = None) -> List[Path]:
    """Migration files in apply order."""
    return sorted((directory or MIGRATIONS_DIR).glob("*.sql"))


class MigrationRunner:
    """Applies SQL migration files in a single transaction each."""

    def __init__(self, config: DatabaseConfig, directory: Optional[Path] = None):
        self.config = config
        self.directory = directory or MIGRATIONS_DIR

    @contextmanager
    def _connection(self):
        try:
            connection = psycopg.connect(
                build_connection_string(self.config),
                row_factory=dict_row,
                connect_timeout=self.config.connection_timeout
            )
        except psycopg.Error as e:
            raise DatabaseConnectionError('PostgreSQL', e) from e

        try:
            yield connection
        finally:
            connection.close()
            logger.debug("Database connection closed")

    def apply(self, files: Optional[List[Path]] = None) -> List[str]:
        """
        Apply migrations, rolling back the file that fails.

        Returns:
            Names of the applied files
        """
        files = files if files is not None else list_migrations(self.directory)
        applied = []

        with self._connection() as connection:
            for path in files:
                sql = path.read_text(encoding='utf-8')
                logger.info(f"Applying migration {path.name}")
                try:
                    with connection.transaction():
                        connection.execute(sql)
                except psycopg.Error as e:
                    logger.error(f"Migration {path.name} failed: {e}")
                    raise DatabaseOperationError('migrate', path.name, e) from e
                applied.append(path.name)

        logger.info(f"Applied {len(applied)} migrations")
        return applied
