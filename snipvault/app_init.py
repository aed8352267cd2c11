# =============================================================================
# File: app_init.py
# Date: 2026-10-19
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import threading
from typing import Optional

from snipvault.config.config_loader import ConfigLoader
from snipvault.logger import get_logger
from snipvault.services.search_service import SearchService

logger = get_logger("app_init")

APP_SETTINGS = ConfigLoader.get_app_settings()

_SERVICE_LOCK = threading.Lock()
_SEARCH_SERVICE: Optional[SearchService] = None


def get_search_service() -> SearchService:
    """Process-wide SearchService, created on first use."""
    global _SEARCH_SERVICE
    if _SEARCH_SERVICE is None:
        with _SERVICE_LOCK:
            if _SEARCH_SERVICE is None:
                _SEARCH_SERVICE = SearchService.from_settings(APP_SETTINGS)
                logger.info("Search service initialized")
    return _SEARCH_SERVICE
