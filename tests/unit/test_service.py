"""Tests for the service pipeline, cache integration and wiring."""

import pytest

from flatdata.core.cache import CacheGateway, FileCache, InMemoryCache
from flatdata.core.config import Settings
from flatdata.core.exceptions import RepositoryPathNotFound
from flatdata.relations.hydrator import RELATION_PROPERTIES_KEY
from flatdata.repositories.json_loader import JsonLoader
from flatdata.service import FlatDataService, create_cache, create_service


class BrokenCache:
    def get(self, key):
        raise OSError("cache store unreadable")

    def set(self, key, data):
        raise OSError("cache store unwritable")


class TestLoadRecords:
    def test_full_pipeline(self, service):
        records = service.load_records("project")
        real = records["real_project_1"]
        assert real["manager"]["name"] == "Mr. Admin"
        assert set(real["work_items"]) == {"work_item_a", "work_item_b"}
        assert RELATION_PROPERTIES_KEY not in real

    def test_without_cache_every_call_rehydrates(self, service, parser):
        service.load_records("user")
        first_count = len(parser.calls)
        service.load_records("user")
        assert len(parser.calls) == 2 * first_count

    def test_unrecognized_relation_type_left_as_mapping(self, data_dir, service):
        (data_dir / "team.yml").write_text(
            "core:\n  lead:\n    repository: user\n    type: single\n    values: [joe]\n"
        )
        core = service.get_repository("team").get_record("core").execute()
        assert core["lead"] == {"joe": {"name": "Joe", "email": "joe@example.com"}}
        assert core["type"] == "single"

    def test_load_repository_is_raw(self, service):
        raw = service.load_repository("project")
        assert raw["real_project_1"]["manager"]["repository"] == "user"

    def test_repository_names(self, service):
        assert service.repository_names() == ["note", "project", "user", "work_item"]

    def test_resolve_relation(self, service):
        resolved = service.resolve_relation({"repository": "user", "values": ["joe", "bob"]})
        assert list(resolved) == ["joe"]


class TestCachedService:
    @pytest.fixture
    def backend(self):
        return InMemoryCache()

    @pytest.fixture
    def cached_service(self, loader, backend):
        return FlatDataService(loader, cache=backend)

    def test_hit_skips_hydration(self, cached_service, parser):
        first = cached_service.load_records("user")
        calls_after_miss = len(parser.calls)
        assert calls_after_miss > 0

        second = cached_service.load_records("user")
        assert len(parser.calls) == calls_after_miss
        assert second == first

    def test_miss_writes_hydrated_set(self, cached_service, backend, service):
        cached_service.load_records("project")
        stored = CacheGateway(backend).load("project")
        assert stored == service.load_records("project")
        assert backend.get("flat-data-repository:project") is not None

    def test_entries_are_never_invalidated(self, cached_service, data_dir):
        cached_service.load_records("note")
        (data_dir / "note.yml").write_text("n9:\n  text: changed\n")
        assert set(cached_service.load_records("note")) == {"n1", "n2"}

    def test_cursor_uses_cache(self, cached_service, parser):
        cached_service.get_repository("user")
        calls = len(parser.calls)
        joe = cached_service.get_repository("user").get_record("joe").execute()
        assert len(parser.calls) == calls
        assert joe["name"] == "Joe"

    def test_file_cache_survives_new_service(self, loader, tmp_path, parser):
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        FlatDataService(loader, cache=FileCache(cache_dir)).load_records("user")
        calls = len(parser.calls)

        records = FlatDataService(loader, cache=FileCache(cache_dir)).load_records("user")
        assert len(parser.calls) == calls
        assert "managed_projects" in records["mr_admin"]

    def test_broken_cache_falls_back_to_hydration(self, loader):
        service = FlatDataService(loader, cache=BrokenCache())
        records = service.load_records("user")
        assert "projects" in records["joe"]


class TestCreateService:
    def test_from_settings(self, data_dir):
        settings = Settings(repositories_path=data_dir)
        service = create_service(settings)
        assert service.cache is None
        assert service.get_repository("user").get_record("joe").get_property("name").execute() == "Joe"

    def test_hydration_flags(self, data_dir):
        settings = Settings(
            repositories_path=data_dir,
            hydrate_local_relations=False,
            hydrate_foreign_relations=False,
        )
        records = create_service(settings).load_records("project")
        assert records["real_project_1"]["manager"]["repository"] == "user"

    def test_json_loader(self, tmp_path):
        (tmp_path / "user.json").write_text('{"joe": {"name": "Joe"}}')
        service = create_service(Settings(repositories_path=tmp_path, loader="json"))
        assert isinstance(service.loader.parser, JsonLoader)
        assert service.load_records("user") == {"joe": {"name": "Joe"}}

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RepositoryPathNotFound):
            create_service(Settings(repositories_path=tmp_path / "missing"))

    def test_memory_cache(self, data_dir):
        settings = Settings(repositories_path=data_dir, cache_backend="memory", cache_key_prefix="t:")
        service = create_service(settings)
        assert isinstance(service.cache.cache, InMemoryCache)
        assert service.cache.make_key("user") == "t:user"

    def test_file_cache_directory_created(self, tmp_path):
        cache_dir = tmp_path / "nested" / "cache"
        cache = create_cache(Settings(cache_backend="file", cache_dir=cache_dir))
        assert isinstance(cache, FileCache)
        assert cache_dir.is_dir()

    def test_no_cache(self):
        assert create_cache(Settings(cache_backend="none")) is None
