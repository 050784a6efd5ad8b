#!/usr/bin/env python3
"""
ASGI entry point: ``uvicorn api.main:app`` (run with src on the path).
"""

import logging

from api.app import create_app
from core.config import get_config_manager

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
get_config_manager().update_logging()

app = create_app()
