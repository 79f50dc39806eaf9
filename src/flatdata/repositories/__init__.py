"""Repository loading: directory scanning and file parsers."""

from flatdata.repositories.json_loader import JsonLoader
from flatdata.repositories.loader import RepositoryLoader
from flatdata.repositories.protocols import DataLoader, RecordCache
from flatdata.repositories.yaml_loader import YamlLoader

__all__ = [
    "DataLoader",
    "JsonLoader",
    "RecordCache",
    "RepositoryLoader",
    "YamlLoader",
]
