#!/usr/bin/env python3
"""
Serve command: run the HTTP API with uvicorn.
"""

import logging
from argparse import Namespace

import uvicorn

from .base import BaseCommand

logger = logging.getLogger(__name__)


class ServeCommand(BaseCommand):
    """Run the HTTP API."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        try:
            if subcommand == "api":
                return self.api(args)
            return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"serve {subcommand}")

    def api(self, args: Namespace) -> int:
        """Start uvicorn in the foreground."""
        logger.info(f"Starting API on {args.host}:{args.port}")

        if args.reload:
            # Reload needs an import string so the worker can rebuild the app
            uvicorn.run("api.main:app", host=args.host, port=args.port, reload=True)
        else:
            from api.app import create_app
            uvicorn.run(create_app(self.container), host=args.host, port=args.port)
        return 0
