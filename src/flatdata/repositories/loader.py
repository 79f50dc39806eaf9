"""
Repository loader.

Locates ``<name>.<extension>`` files in one directory and delegates parsing
to an injected :class:`~flatdata.repositories.protocols.DataLoader`. Nothing
is cached here: every call re-reads and re-parses the file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flatdata.core.exceptions import (
    InvalidRepositoryFormat,
    RepositoryNotFound,
    RepositoryPathNotFound,
)
from flatdata.core.values import RecordSet
from flatdata.repositories.protocols import DataLoader

logger = logging.getLogger(__name__)


class RepositoryLoader:
    """
    Loads raw repositories from a directory of flat files.

    Example:
        >>> loader = RepositoryLoader("config/data", YamlLoader())
        >>> loader.list_repository_names()
        ['project', 'user']
        >>> loader.load_raw("project")["real_project_1"]["name"]
        'real project 1!'
    """

    def __init__(self, repositories_path: Path | str, parser: DataLoader):
        """
        Initialize the loader.

        Args:
            repositories_path: Directory holding one file per repository.
            parser: Parser collaborator; its extension selects the files.

        Raises:
            RepositoryPathNotFound: If the directory does not exist.
        """
        path = Path(repositories_path)
        if not path.is_dir():
            raise RepositoryPathNotFound(path)

        self.repositories_path = path
        self.parser = parser

    @property
    def extension(self) -> str:
        return self.parser.extension

    def repository_path(self, name: str) -> Path:
        """Path of the file backing repository ``name``."""
        return self.repositories_path / f"{name}.{self.extension}"

    def load_raw(self, name: str) -> RecordSet:
        """
        Load and parse a repository.

        Args:
            name: Repository name (file name without extension).

        Returns:
            Mapping of record id to record body. An empty file is an empty
            repository.

        Raises:
            RepositoryNotFound: If the backing file is absent.
            InvalidRepositoryFormat: If the file's top level is not a mapping.
            RepositoryParseError: If the parser cannot read the file.
        """
        path = self.repository_path(name)
        if not path.is_file():
            raise RepositoryNotFound(name, path)

        logger.debug("Loading repository %s from %s", name, path)
        data = self.parser.load(path)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise InvalidRepositoryFormat(name, type(data).__name__)
        return data

    def list_repository_names(self) -> list[str]:
        """
        Enumerate repositories available in the directory.

        Returns:
            Sorted names of files whose suffix is exactly ``.<extension>``.
        """
        suffix = f".{self.extension}"
        names = [
            entry.name[: -len(suffix)]
            for entry in self.repositories_path.iterdir()
            if entry.name not in (".", "..")
            and entry.name.endswith(suffix)
            and len(entry.name) > len(suffix)
            and entry.is_file()
        ]
        return sorted(names)
