"""Tests for repository loading."""

import orjson
import pytest

from flatdata.core.exceptions import (
    InvalidRepositoryFormat,
    RepositoryNotFound,
    RepositoryParseError,
    RepositoryPathNotFound,
)
from flatdata.repositories import DataLoader, JsonLoader, RepositoryLoader, YamlLoader


class TestRepositoryLoader:
    """Tests for RepositoryLoader with the YAML parser."""

    def test_missing_directory_fails(self, tmp_path):
        with pytest.raises(RepositoryPathNotFound):
            RepositoryLoader(tmp_path / "nope", YamlLoader())

    def test_load_raw(self, loader):
        users = loader.load_raw("user")
        assert set(users) == {"mr_admin", "joe"}
        assert users["joe"]["name"] == "Joe"

    def test_integer_keys_preserved(self, loader):
        projects = loader.load_raw("project")
        assert projects[3]["some_value"] == 9
        assert len(projects) == 11

    def test_missing_repository(self, loader):
        with pytest.raises(RepositoryNotFound) as exc_info:
            loader.load_raw("missing")
        assert exc_info.value.details["repository"] == "missing"

    def test_no_caching_at_this_layer(self, loader, parser):
        first = loader.load_raw("user")
        second = loader.load_raw("user")
        assert first == second
        assert first is not second
        assert parser.calls == ["user", "user"]

    def test_empty_file_is_empty_repository(self, data_dir, loader):
        (data_dir / "empty.yml").write_text("")
        assert loader.load_raw("empty") == {}

    def test_non_mapping_repository_rejected(self, data_dir, loader):
        (data_dir / "listy.yml").write_text("- a\n- b\n")
        with pytest.raises(InvalidRepositoryFormat):
            loader.load_raw("listy")

    def test_malformed_yaml_rejected(self, data_dir, loader):
        (data_dir / "broken.yml").write_text("a: [unclosed\n")
        with pytest.raises(RepositoryParseError) as exc_info:
            loader.load_raw("broken")
        assert exc_info.value.details["path"].endswith("broken.yml")

    def test_list_repository_names(self, data_dir, loader):
        (data_dir / "readme.txt").write_text("not a repository")
        (data_dir / "other.yml.bak").write_text("a: 1")
        (data_dir / "subdir.yml").mkdir()
        assert loader.list_repository_names() == ["note", "project", "user", "work_item"]


class TestJsonLoader:
    def test_loads_json_repositories(self, tmp_path):
        (tmp_path / "user.json").write_bytes(orjson.dumps({"joe": {"name": "Joe"}}))
        (tmp_path / "user.yml").write_text("ignored: {}")

        loader = RepositoryLoader(tmp_path, JsonLoader())
        assert loader.list_repository_names() == ["user"]
        assert loader.load_raw("user") == {"joe": {"name": "Joe"}}

    def test_empty_json_file(self, tmp_path):
        (tmp_path / "empty.json").write_text("  ")
        loader = RepositoryLoader(tmp_path, JsonLoader())
        assert loader.load_raw("empty") == {}

    def test_malformed_json_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text('{"joe": ')
        loader = RepositoryLoader(tmp_path, JsonLoader())
        with pytest.raises(RepositoryParseError):
            loader.load_raw("broken")


class TestProtocols:
    def test_parsers_satisfy_protocol(self):
        assert isinstance(YamlLoader(), DataLoader)
        assert isinstance(JsonLoader(), DataLoader)
        assert YamlLoader().extension == "yml"
        assert JsonLoader().extension == "json"
