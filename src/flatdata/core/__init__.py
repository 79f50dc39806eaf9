"""
Core infrastructure for flatdata.

Provides:
- Configuration management
- Logging setup
- Error taxonomy
- Value model helpers
- Record set caching
"""

from flatdata.core.cache import CacheGateway, FileCache, InMemoryCache
from flatdata.core.config import Settings, get_settings
from flatdata.core.logging import setup_logging

__all__ = [
    "CacheGateway",
    "FileCache",
    "InMemoryCache",
    "Settings",
    "get_settings",
    "setup_logging",
]
