"""JSON repository parser."""

from pathlib import Path

import orjson

from flatdata.core.exceptions import RepositoryParseError
from flatdata.core.values import Value


class JsonLoader:
    """Parses ``<name>.json`` repository files with orjson."""

    extension = "json"

    def load(self, path: Path) -> Value:
        with open(path, "rb") as f:
            content = f.read()
        if not content.strip():
            return None
        try:
            return orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise RepositoryParseError(path, str(e)) from e
