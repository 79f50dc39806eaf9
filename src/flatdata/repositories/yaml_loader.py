"""YAML repository parser."""

from pathlib import Path

import yaml

from flatdata.core.exceptions import RepositoryParseError
from flatdata.core.values import Value


class YamlLoader:
    """Parses ``<name>.yml`` repository files with PyYAML."""

    extension = "yml"

    def load(self, path: Path) -> Value:
        try:
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise RepositoryParseError(path, str(e)) from e
