#!/usr/bin/env python3
"""
Database command endpoints: print or apply the SQL schema.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.migrations import MigrationRunner, list_migrations

logger = logging.getLogger(__name__)


class DatabaseCommand(BaseCommand):
    """Manage the database schema."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute db subcommand."""
        try:
            if subcommand == "schema":
                return self.schema(args)
            elif subcommand == "migrate":
                return self.migrate(args)
            return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"db {subcommand}")

    def schema(self, args: Namespace) -> int:
        """Print migration SQL for pasting into the Supabase SQL editor."""
        files = list_migrations()
        if not files:
            print("No migration files found")
            return 1

        for path in files:
            print(f"-- {path.name}")
            print("=" * 60)
            print(path.read_text(encoding='utf-8'))
        return 0

    def migrate(self, args: Namespace) -> int:
        """Apply migrations over a direct PostgreSQL connection."""
        applied = MigrationRunner(self.config.database).apply()
        for name in applied:
            print(f"Applied {name}")
        print(f"\n{len(applied)} migrations applied")
        return 0
