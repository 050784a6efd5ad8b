#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
Uses dependency injection for better testability and maintainability.
"""

import logging
from abc import ABC, abstractmethod
from typing import List
from argparse import Namespace

from core.container import get_container
from core.exceptions import DemocracyLensError, ValidationError, NotFoundError, ConfigurationError

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all CLI commands.

    Services are fetched lazily from the dependency injection container, so a
    command only needs configuration for the collaborators it actually uses.
    """

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container

    @property
    def container(self):
        if self._container is None:
            self._container = get_container()
        return self._container

    @property
    def config(self):
        """Get configuration from container."""
        return self.container.get('config')

    @property
    def db(self):
        """Get Supabase adapter from container."""
        return self.container.get('database')

    def service(self, name: str):
        return self.container.get(name)

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """Subcommands are the public methods a command defines beyond the base class."""
        base_names = set(dir(BaseCommand))
        return [
            name for name in dir(self)
            if not name.startswith('_') and name not in base_names and callable(getattr(self, name))
        ]

    def unknown_subcommand(self, subcommand: str) -> int:
        available = ", ".join(self.get_available_subcommands())
        self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
        return 1

    def handle_error(self, error: Exception, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        # Map common exceptions to exit codes
        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130
        elif isinstance(error, (ValidationError, NotFoundError)):
            self.logger.error(error_msg)
            return 2
        elif isinstance(error, (ConfigurationError, ValueError)):
            self.logger.error(error_msg)
            return 22
        elif isinstance(error, DemocracyLensError):
            self.logger.error(f"{error_msg} {error.context}")
            return 1
        else:
            self.logger.error(error_msg, exc_info=True)
            return 1
