"""
Flat data service.

Wires the repository loader, relation hydrator, stager and optional cache
together and hands out query cursors.
"""

from __future__ import annotations

import logging
from typing import Any

from flatdata.core.cache import DEFAULT_KEY_PREFIX, CacheGateway, FileCache, InMemoryCache
from flatdata.core.config import Settings, get_settings
from flatdata.core.values import RecordSet, Value
from flatdata.query.cursor import QueryCursor
from flatdata.relations.detector import RelationDeclaration
from flatdata.relations.hydrator import RelationHydrator, resolve_declaration
from flatdata.relations.stager import stage
from flatdata.repositories.json_loader import JsonLoader
from flatdata.repositories.loader import RepositoryLoader
from flatdata.repositories.protocols import RecordCache
from flatdata.repositories.yaml_loader import YamlLoader

logger = logging.getLogger(__name__)

LOADERS = {
    "yaml": YamlLoader,
    "json": JsonLoader,
}


class FlatDataService:
    """
    Read-only, relation-aware access to a directory of flat data files.

    Example:
        >>> service = FlatDataService(RepositoryLoader("data", YamlLoader()))
        >>> service.get_repository("project").filter("some_value", "<", 10).execute()
        {0: {...}, 1: {...}, 2: {...}, 3: {...}}
    """

    def __init__(
        self,
        loader: RepositoryLoader,
        cache: RecordCache | None = None,
        hydrate_local: bool = True,
        hydrate_foreign: bool = True,
        cache_key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        """
        Initialize the service.

        Args:
            loader: Repository loader bound to a directory and parser.
            cache: Optional cache backend for hydrated record sets.
            hydrate_local: Resolve relations declared by the repository itself.
            hydrate_foreign: Embed records of other repositories that point
                here through a ``foreign_alias``.
            cache_key_prefix: Prefix of cache keys.
        """
        self.loader = loader
        self.hydrator = RelationHydrator(
            loader, hydrate_local=hydrate_local, hydrate_foreign=hydrate_foreign
        )
        self.cache = CacheGateway(cache, cache_key_prefix) if cache is not None else None

    def query(self) -> QueryCursor:
        """Start a new, empty query chain."""
        return QueryCursor(service=self)

    def get_repository(self, name: str) -> QueryCursor:
        """Start a query chain on repository ``name``."""
        return self.query().get_repository(name)

    def load_records(self, name: str) -> RecordSet:
        """
        Produce the hydrated record set of a repository.

        A cache hit skips hydration entirely; a miss loads, hydrates, stages
        and writes the result back.
        """
        if self.cache is not None:
            records = self.cache.load(name)
            if records is not None:
                return records

        records = self.loader.load_raw(name)
        records = self.hydrator.hydrate(name, records)
        records = stage(records)
        logger.debug("Hydrated repository %s (%d records)", name, len(records))

        if self.cache is not None:
            self.cache.store(name, records)
        return records

    def load_repository(self, name: str) -> RecordSet:
        """Load a repository's raw, unhydrated records."""
        return self.loader.load_raw(name)

    def repository_names(self) -> list[str]:
        """Names of all repositories in the configured directory."""
        return self.loader.list_repository_names()

    def resolve_relation(self, declaration: Value) -> dict[Any, Value]:
        """
        Resolve a relation declaration on demand.

        Returns:
            ``{related id: related record}`` for the ids found in the target
            repository.
        """
        parsed = RelationDeclaration.from_value(declaration)
        return resolve_declaration(parsed, self.loader.load_raw(parsed.repository))


def create_cache(settings: Settings) -> RecordCache | None:
    """Build the configured cache backend, if any."""
    if not settings.use_cache:
        return None
    if settings.cache_backend == "memory":
        return InMemoryCache(default_ttl=settings.cache_ttl)
    if settings.cache_backend == "file":
        settings.cache_dir.mkdir(parents=True, exist_ok=True)
        return FileCache(settings.cache_dir, default_ttl=settings.cache_ttl)
    return None


def create_service(settings: Settings | None = None) -> FlatDataService:
    """
    Build a service from settings.

    Args:
        settings: Settings to use (default: ``get_settings()``).

    Returns:
        Configured FlatDataService.
    """
    settings = settings or get_settings()

    loader = RepositoryLoader(settings.repositories_path, LOADERS[settings.loader]())
    service = FlatDataService(
        loader,
        cache=create_cache(settings),
        hydrate_local=settings.hydrate_local_relations,
        hydrate_foreign=settings.hydrate_foreign_relations,
        cache_key_prefix=settings.cache_key_prefix,
    )
    logger.info(
        "Flat data service ready: path=%s loader=%s cache=%s",
        settings.repositories_path,
        settings.loader,
        settings.cache_backend,
    )
    return service
