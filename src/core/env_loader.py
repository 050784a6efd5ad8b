#!/usr/bin/env python3
"""
Environment variable loader with .env file support.

Safely loads environment variables from .env file if present.
"""

import os
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


def load_env_file(env_file_path: str = ".env") -> int:
    """
    Load environment variables from .env file if it exists.

    Args:
        env_file_path: Path to .env file, relative to the project root

    Returns:
        Number of variables loaded
    """
    # Project root sits two levels above src/core
    project_root = Path(__file__).parent.parent.parent
    env_path = project_root / env_file_path

    if not env_path.exists():
        logger.debug(f"No .env file found at {env_path}")
        return 0

    try:
        with open(env_path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.error(f"Error reading .env file {env_path}: {e}")
        return 0

    loaded_count = 0
    for line_num, line in enumerate(lines, 1):
        line = line.strip()

        if not line or line.startswith('#'):
            continue

        if '=' not in line:
            logger.warning(f"Invalid .env format at line {line_num}")
            continue

        key, value = line.split('=', 1)
        key = key.strip()
        value = _strip_quotes(value.strip())

        # Real environment wins over the file
        if key not in os.environ:
            os.environ[key] = value
            loaded_count += 1
            logger.debug(f"Loaded {key} from .env")

    logger.info(f"Loaded {loaded_count} variables from {env_path}")
    return loaded_count


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def get_env_var(key: str, default: str = None, required: bool = False) -> str:
    """
    Get environment variable with optional default and required validation.

    Args:
        key: Environment variable name
        default: Default value if not found
        required: Whether the variable is required

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is missing
    """
    value = os.environ.get(key, default)

    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set")

    return value


def validate_database_config() -> bool:
    """
    Validate that the Supabase configuration is present.

    Raises:
        ValueError: If required configuration is missing
    """
    supabase_url = os.environ.get('SUPABASE_URL', '')
    if not supabase_url:
        raise ValueError("Missing required database environment variable: SUPABASE_URL")

    if not supabase_url.startswith('https://'):
        raise ValueError("Invalid SUPABASE_URL format. Expected: https://your-project.supabase.co")

    if not (os.environ.get('SUPABASE_SERVICE_KEY') or os.environ.get('SUPABASE_ANON_KEY')):
        raise ValueError("Neither SUPABASE_SERVICE_KEY nor SUPABASE_ANON_KEY is set")

    logger.info("Database configuration validated successfully")
    return True
