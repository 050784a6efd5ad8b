#!/usr/bin/env python3
"""
CLI Router for the Democracy Lens backend.

Modular command architecture: one command class per top-level command.
"""

import argparse
import logging
import sys
from typing import Optional, List

from core.config import get_config_manager
from core.env_loader import get_env_var
from integrations.news_api_client import SORT_OPTIONS
from commands import get_command, list_commands, COMMANDS

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for backend operations.

    Command structure:
    - python run.py news fetch --query "election" --page 2
    - python run.py articles analyze --id <uuid>
    - python run.py db migrate
    - python run.py serve api --port 8000
    """

    def __init__(self, container=None):
        """
        Args:
            container: Optional dependency container passed on to commands
        """
        self.container = container
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description="Democracy Lens: news aggregation, guest voting and bias analysis",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_news_parser(subparsers)
        self._add_articles_parser(subparsers)
        self._add_db_parser(subparsers)
        self._add_health_parser(subparsers)
        self._add_serve_parser(subparsers)

        return parser

    def _add_news_parser(self, subparsers):
        """Add news command parser."""
        news_parser = subparsers.add_parser('news', help='News feed operations')

        news_subparsers = news_parser.add_subparsers(
            dest='subcommand',
            help='News operations',
            metavar='{fetch}'
        )

        fetch_parser = news_subparsers.add_parser('fetch', help='Fetch a page of news, caching new articles')
        fetch_parser.add_argument('--query', default='', help='Search terms (default: political news query)')
        fetch_parser.add_argument('--from', dest='from_date', default=None, help='Only articles published on or after this ISO date')
        fetch_parser.add_argument('--sort-by', dest='sort_by', choices=SORT_OPTIONS, default='publishedAt', help='Sort order (default: publishedAt)')
        fetch_parser.add_argument('--page', type=int, default=1, help='Page number (default: 1)')
        fetch_parser.add_argument('--verbose', action='store_true', help='Verbose output')

    def _add_articles_parser(self, subparsers):
        """Add articles command parser."""
        articles_parser = subparsers.add_parser('articles', help='Stored article operations')

        articles_subparsers = articles_parser.add_subparsers(
            dest='subcommand',
            help='Article operations',
            metavar='{list,show,analyze}'
        )

        articles_subparsers.add_parser('list', help='List the newest stored articles')

        show_parser = articles_subparsers.add_parser('show', help='Show one stored article')
        show_parser.add_argument('--id', required=True, help='Article id')

        analyze_parser = articles_subparsers.add_parser('analyze', help='Generate AI summary and political score')
        analyze_parser.add_argument('--id', required=True, help='Article id or external id')

    def _add_db_parser(self, subparsers):
        """Add db command parser."""
        db_parser = subparsers.add_parser('db', help='Database schema operations')

        db_subparsers = db_parser.add_subparsers(
            dest='subcommand',
            help='Database operations',
            metavar='{schema,migrate}'
        )

        db_subparsers.add_parser('schema', help='Print the SQL schema')
        db_subparsers.add_parser('migrate', help='Apply the SQL schema (needs SUPABASE_DB_PASSWORD)')

    def _add_health_parser(self, subparsers):
        """Add health command parser."""
        health_parser = subparsers.add_parser(
            'health',
            help='System health monitoring and diagnostics'
        )

        health_subparsers = health_parser.add_subparsers(
            dest='subcommand',
            help='Health operations',
            metavar='{check,database,integrations}'
        )

        health_subparsers.add_parser('check', help='Run comprehensive health check')
        health_subparsers.add_parser('database', help='Check database health')

        integrations_parser = health_subparsers.add_parser('integrations', help='Check integration health')
        integrations_parser.add_argument('--test', action='store_true', help='Test actual connections')

    def _add_serve_parser(self, subparsers):
        """Add serve command parser."""
        serve_parser = subparsers.add_parser('serve', help='Run the HTTP API')

        serve_subparsers = serve_parser.add_subparsers(
            dest='subcommand',
            help='Servers',
            metavar='{api}'
        )

        api_parser = serve_subparsers.add_parser('api', help='Run the API with uvicorn')
        api_parser.add_argument('--host', default=get_env_var('HOST', '127.0.0.1'), help='Bind address (default: 127.0.0.1)')
        api_parser.add_argument('--port', type=int, default=int(get_env_var('PORT', '8000')), help='Port (default: 8000)')
        api_parser.add_argument('--reload', action='store_true', help='Reload on code changes (development)')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        commands = "\n".join(
            f"  {name:<10} {(doc or '').strip().splitlines()[0] if doc else ''}"
            for name, doc in list_commands().items()
        )
        return f"""
Commands:
{commands}

Examples:
  python run.py news fetch --query "supreme court" --verbose
  python run.py articles list
  python run.py articles analyze --id 3f1c9a4e-...
  python run.py db schema
  python run.py health check
  python run.py serve api --port 8000 --reload
"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self.parser.print_help()
            return 1

        command = get_command(args.command, self.container)
        return command.execute(subcommand, args)


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        get_config_manager().update_logging()
    except ValueError as e:
        logger.error(str(e))
        return 22

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
