#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including environment variables, defaults, and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict

from core.env_loader import load_env_file

logger = logging.getLogger(__name__)

DEFAULT_NEWS_QUERY = "politics OR democracy OR government"


@dataclass
class DatabaseConfig:
    """Supabase connection configuration."""
    supabase_url: str
    supabase_anon_key: Optional[str] = None
    supabase_service_key: Optional[str] = None
    supabase_db_password: Optional[str] = None  # only needed for migrations
    connection_timeout: int = 30

    @property
    def api_key(self) -> Optional[str]:
        """Service key when available (full permissions), anon key otherwise."""
        return self.supabase_service_key or self.supabase_anon_key


@dataclass
class IntegrationConfig:
    """External integration configuration."""
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    news_api_key: Optional[str] = None
    news_api_url: str = "https://newsapi.org/v2/everything"
    regulations_api_key: Optional[str] = None
    regulations_api_url: str = "https://api.regulations.gov/v4"


@dataclass
class ApplicationConfig:
    """Core application configuration."""
    # News reads
    news_page_size: int = 10
    default_news_query: str = DEFAULT_NEWS_QUERY
    news_language: str = "en"
    request_timeout: int = 10

    regulations_cache_ttl_seconds: int = 900

    storage_bucket: str = "articles"

    # Input limits
    max_title_length: int = 500
    max_summary_length: int = 2000
    max_url_length: int = 2048

    frontend_origin: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass
class Config:
    """Master configuration container."""
    database: DatabaseConfig
    integrations: IntegrationConfig
    app: ApplicationConfig

    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ['dev', 'development', 'local']

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() in ['prod', 'production']

    def has_openai(self) -> bool:
        return bool(self.integrations.openai_api_key)

    def has_news_api(self) -> bool:
        return bool(self.integrations.news_api_key)

    def has_regulations_api(self) -> bool:
        return bool(self.integrations.regulations_api_key)

    def integration_status(self) -> Dict[str, bool]:
        """Get status of all integrations."""
        return {
            'openai': self.has_openai(),
            'news_api': self.has_news_api(),
            'regulations_api': self.has_regulations_api(),
        }


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to .env file relative to project root
        """
        self._config: Optional[Config] = None
        load_env_file(env_file_path)

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""

        database_config = DatabaseConfig(
            supabase_url=self._get_required_env('SUPABASE_URL'),
            supabase_anon_key=os.getenv('SUPABASE_ANON_KEY'),
            supabase_service_key=os.getenv('SUPABASE_SERVICE_KEY'),
            supabase_db_password=os.getenv('SUPABASE_DB_PASSWORD'),
            connection_timeout=int(os.getenv('DB_CONNECTION_TIMEOUT', '30'))
        )

        integration_config = IntegrationConfig(
            openai_api_key=os.getenv('OPENAI_API_KEY'),
            openai_model=os.getenv('OPENAI_MODEL', 'gpt-4o'),
            news_api_key=os.getenv('NEWS_API_KEY'),
            news_api_url=os.getenv('NEWS_API_URL', 'https://newsapi.org/v2/everything'),
            regulations_api_key=os.getenv('REGULATIONS_API_KEY'),
            regulations_api_url=os.getenv('REGULATIONS_API_URL', 'https://api.regulations.gov/v4')
        )

        app_config = ApplicationConfig(
            news_page_size=int(os.getenv('NEWS_PAGE_SIZE', '10')),
            default_news_query=os.getenv('DEFAULT_NEWS_QUERY', DEFAULT_NEWS_QUERY),
            news_language=os.getenv('NEWS_LANGUAGE', 'en'),
            request_timeout=int(os.getenv('REQUEST_TIMEOUT', '10')),
            regulations_cache_ttl_seconds=int(os.getenv('REGULATIONS_CACHE_TTL', '900')),
            storage_bucket=os.getenv('STORAGE_BUCKET', 'articles'),
            max_title_length=int(os.getenv('MAX_TITLE_LENGTH', '500')),
            max_summary_length=int(os.getenv('MAX_SUMMARY_LENGTH', '2000')),
            max_url_length=int(os.getenv('MAX_URL_LENGTH', '2048')),
            frontend_origin=os.getenv('FRONTEND_ORIGIN', 'http://localhost:3000'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            verbose_logging=os.getenv('VERBOSE_LOGGING', 'false').lower() == 'true'
        )

        config = Config(
            database=database_config,
            integrations=integration_config,
            app=app_config
        )

        self._validate_config(config)
        return config

    def _get_required_env(self, key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise ValueError(f"Required environment variable {key} is not set")
        return value

    def _validate_config(self, config: Config) -> None:
        """Validate configuration values, reporting every problem at once."""
        errors = []

        if not config.database.supabase_url.startswith('https://'):
            errors.append("SUPABASE_URL must start with https://")

        if not config.database.api_key:
            errors.append("SUPABASE_SERVICE_KEY or SUPABASE_ANON_KEY must be set")

        if config.app.news_page_size < 1 or config.app.news_page_size > 100:
            errors.append("NEWS_PAGE_SIZE must be between 1 and 100")

        if config.app.request_timeout < 1:
            errors.append("REQUEST_TIMEOUT must be at least 1 second")

        if config.app.regulations_cache_ttl_seconds < 0:
            errors.append("REGULATIONS_CACHE_TTL must not be negative")

        if not config.app.default_news_query.strip():
            errors.append("DEFAULT_NEWS_QUERY must not be empty")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.app.log_level not in valid_log_levels:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        logger.info("Configuration validation passed")

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.app.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.app.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S'))


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()
