"""
flatdata - relation-aware, read-only access to flat data files.

Each repository is one file (``<name>.yml`` or ``<name>.json``) mapping
record ids to records. Records may declare relations to other repositories;
the engine resolves them on load and caches the result if asked to.

Example:
    >>> from flatdata import FlatDataService, RepositoryLoader, YamlLoader
    >>>
    >>> service = FlatDataService(RepositoryLoader("data", YamlLoader()))
    >>> service.get_repository("user").get_record("mr_admin").get_property("name").execute()
    'Mr. Admin'
"""

__version__ = "0.1.0"

from flatdata.core.cache import CacheGateway, FileCache, InMemoryCache
from flatdata.core.config import Settings, get_settings
from flatdata.core.exceptions import (
    AlreadyScopedToRecord,
    CacheDirectoryNotFound,
    FlatDataError,
    InvalidRepositoryFormat,
    InvalidStateTransition,
    MalformedRelationDeclaration,
    PropertyNotFound,
    RecordNotFound,
    RepositoryNotFound,
    RepositoryParseError,
    RepositoryPathNotFound,
    UnsupportedOperator,
)
from flatdata.query import CursorState, FilterOperator, QueryCursor
from flatdata.repositories import DataLoader, JsonLoader, RecordCache, RepositoryLoader, YamlLoader
from flatdata.service import FlatDataService, create_service

__all__ = [
    "__version__",
    # Service
    "FlatDataService",
    "create_service",
    # Query
    "CursorState",
    "FilterOperator",
    "QueryCursor",
    # Repositories
    "DataLoader",
    "JsonLoader",
    "RepositoryLoader",
    "YamlLoader",
    # Cache
    "CacheGateway",
    "FileCache",
    "InMemoryCache",
    "RecordCache",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "AlreadyScopedToRecord",
    "CacheDirectoryNotFound",
    "FlatDataError",
    "InvalidRepositoryFormat",
    "InvalidStateTransition",
    "MalformedRelationDeclaration",
    "PropertyNotFound",
    "RecordNotFound",
    "RepositoryNotFound",
    "RepositoryParseError",
    "RepositoryPathNotFound",
    "UnsupportedOperator",
]
