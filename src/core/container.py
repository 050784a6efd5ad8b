#!/usr/bin/env python3
"""
Dependency Injection Container

Wires configuration, the Supabase adapter, API clients and services together.
Handlers and commands fetch collaborators from a container instead of
constructing them, so tests can register fakes in their place.
"""

import logging
from typing import Any, Dict, Callable, TypeVar, Optional
import threading

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Container:
    """Simple dependency injection container with lifecycle management."""

    def __init__(self):
        """Initialize empty container."""
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def register_singleton(self, service_name: str, factory: Callable[[], T]) -> None:
        """
        Register a service as singleton (created once, reused).

        Args:
            service_name: Unique name for the service
            factory: Function that creates the service instance
        """
        with self._lock:
            self._factories[service_name] = factory
            # Remove any existing instance to force recreation
            self._singletons.pop(service_name, None)

    def register_instance(self, service_name: str, instance: T) -> None:
        """Register an existing instance as singleton."""
        with self._lock:
            self._singletons[service_name] = instance

    def get(self, service_name: str) -> Any:
        """
        Get service instance by name.

        Args:
            service_name: Name of the service to retrieve

        Returns:
            Service instance

        Raises:
            KeyError: If service is not registered
        """
        if service_name in self._singletons:
            return self._singletons[service_name]

        if service_name not in self._factories:
            raise KeyError(f"Service '{service_name}' not registered")

        with self._lock:
            factory = self._factories[service_name]

            # Double-check under the lock
            if service_name not in self._singletons:
                self._singletons[service_name] = factory()
                logger.debug(f"Created singleton instance for '{service_name}'")
            return self._singletons[service_name]


# Global container instance
_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get global container instance (thread-safe singleton)."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = build_container()
    return _container


def build_container(config=None) -> Container:
    """Create a container with the default registrations."""
    container = Container()
    _setup_default_services(container, config)
    return container


def _setup_default_services(container: Container, config=None) -> None:
    """Set up default service registrations with configuration injection."""

    def create_config():
        if config is not None:
            return config
        from core.config import get_config
        return get_config()

    def create_database():
        from core.supabase_adapter import SupabaseApiAdapter
        return SupabaseApiAdapter.from_config(container.get('config').database)

    def create_security_validator():
        from core.security import SecurityValidator
        app = container.get('config').app
        validator = SecurityValidator()
        # Inject configuration values
        validator.MAX_TITLE_LENGTH = app.max_title_length
        validator.MAX_SUMMARY_LENGTH = app.max_summary_length
        validator.MAX_URL_LENGTH = app.max_url_length
        return validator

    def create_news_api_client():
        from integrations.news_api_client import NewsApiClient
        cfg = container.get('config')
        if not cfg.has_news_api():
            logger.warning("NEWS_API_KEY not set; news reads will fall back to the cache")
            return None
        return NewsApiClient(
            api_key=cfg.integrations.news_api_key,
            base_url=cfg.integrations.news_api_url,
            language=cfg.app.news_language,
            timeout=cfg.app.request_timeout
        )

    def create_openai_client():
        from integrations.openai_client import OpenAIClient
        cfg = container.get('config')
        if not cfg.has_openai():
            raise ConfigurationError('OPENAI_API_KEY', 'AI analysis is not configured')
        return OpenAIClient(api_key=cfg.integrations.openai_api_key, model=cfg.integrations.openai_model)

    def create_regulations_client():
        from core.cache import get_regulations_cache
        from integrations.regulations_client import RegulationsClient
        cfg = container.get('config')
        if not cfg.has_regulations_api():
            raise ConfigurationError('REGULATIONS_API_KEY', 'regulations browser is not configured')
        return RegulationsClient(
            api_key=cfg.integrations.regulations_api_key,
            base_url=cfg.integrations.regulations_api_url,
            timeout=cfg.app.request_timeout,
            cache=get_regulations_cache(cfg.app.regulations_cache_ttl_seconds)
        )

    def create_guest_service():
        from core.services.guest_service import GuestService
        return GuestService(container.get('database'), container.get('security_validator'))

    def create_vote_service():
        from core.services.vote_service import VoteService
        return VoteService(container.get('database'), container.get('guest_service'))

    def create_news_service():
        from core.services.news_service import NewsService
        return NewsService(
            database=container.get('database'),
            news_client=container.get('news_api_client'),
            guest_service=container.get('guest_service'),
            page_size=container.get('config').app.news_page_size,
            default_query=container.get('config').app.default_news_query,
            validator=container.get('security_validator')
        )

    def create_analysis_service():
        from core.services.analysis_service import AnalysisService
        return AnalysisService(container.get('database'), container.get('openai_client'))

    def create_storage_service():
        from core.services.storage_service import StorageService
        return StorageService(
            container.get('database'),
            bucket=container.get('config').app.storage_bucket,
            validator=container.get('security_validator')
        )

    container.register_singleton('config', create_config)
    container.register_singleton('database', create_database)
    container.register_singleton('security_validator', create_security_validator)
    container.register_singleton('news_api_client', create_news_api_client)
    container.register_singleton('openai_client', create_openai_client)
    container.register_singleton('regulations_client', create_regulations_client)
    container.register_singleton('guest_service', create_guest_service)
    container.register_singleton('vote_service', create_vote_service)
    container.register_singleton('news_service', create_news_service)
    container.register_singleton('analysis_service', create_analysis_service)
    container.register_singleton('storage_service', create_storage_service)

    logger.debug("Default services registered in container")
